import os

# Keep tests from reading the developer's kubeconfig or environment overrides
os.environ["KUBECONFIG"] = os.devnull
for _var in ("TKN_RESULTS_HOST", "TKN_RESULTS_TOKEN", "TKN_RESULTS_CLIENT_TYPE"):
    os.environ.pop(_var, None)

from tests.fixtures import *  # noqa: E402,F401,F403

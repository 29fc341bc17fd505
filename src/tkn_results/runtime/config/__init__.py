"""Client configuration stored in the kubeconfig."""

from .extension import EXTENSION_NAME, ResultsExtension, parse_bool, parse_duration
from .kubeconfig import KubeConfig, kubeconfig_path
from .results_config import ResultsConfig

__all__ = [
    "EXTENSION_NAME",
    "KubeConfig",
    "ResultsConfig",
    "ResultsExtension",
    "kubeconfig_path",
    "parse_bool",
    "parse_duration",
]

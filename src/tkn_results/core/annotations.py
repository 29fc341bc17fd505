"""Cross-reference annotation keys stamped on stored objects by the results watcher."""

RESULT = "results.tekton.dev/result"
RECORD = "results.tekton.dev/record"
LOG = "results.tekton.dev/log"

"""Resource types the CLI accepts and their short names."""

from __future__ import annotations

from dataclasses import dataclass

from tkn_results.core.errors import SelectorError

# Stored records still use the v1beta1 type name
API_VERSION = "tekton.dev/v1beta1"


@dataclass(frozen=True)
class ResourceType:
    kind: str
    plural: str
    api_version: str = API_VERSION


PIPELINE_RUN = ResourceType(kind="PipelineRun", plural="PipelineRuns")
TASK_RUN = ResourceType(kind="TaskRun", plural="TaskRuns")

ALIASES: dict[str, ResourceType] = {
    "pr": PIPELINE_RUN,
    "pipelinerun": PIPELINE_RUN,
    "pipelineruns": PIPELINE_RUN,
    "tr": TASK_RUN,
    "taskrun": TASK_RUN,
    "taskruns": TASK_RUN,
}


def resolve(name: str) -> ResourceType:
    """Look up a resource type by kind, plural or short name.

    A ``.tekton.dev`` group suffix is accepted.

    Raises:
        SelectorError: If the type is unknown
    """
    key = name.strip().lower().removesuffix(".tekton.dev")
    try:
        return ALIASES[key]
    except KeyError:
        raise SelectorError(
            f'the server doesn\'t have a resource type "{name}"',
            details=f"supported types: {', '.join(sorted(ALIASES))}",
        ) from None

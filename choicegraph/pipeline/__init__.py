"""Pipeline entrypoints and result carriers."""

from choicegraph.pipeline.entrypoints import (
    build_graph,
    build_graph_async,
    run_check,
    run_parse,
    run_scan,
)
from choicegraph.pipeline.results import CheckRunResult, GraphBuildResult, SceneParseResult

__all__ = [
    "CheckRunResult",
    "GraphBuildResult",
    "SceneParseResult",
    "build_graph",
    "build_graph_async",
    "run_check",
    "run_parse",
    "run_scan",
]

"""Graph analysis passes."""

from choicegraph.analysis.graph_checks import (
    GraphReport,
    VariableUsage,
    condition_identifiers,
    detect_cycles,
    extract_variables,
    find_all_paths,
    find_dead_ends,
    find_unreachable_nodes,
    reachable_nodes,
    validate_graph,
)

__all__ = [
    "GraphReport",
    "VariableUsage",
    "condition_identifiers",
    "detect_cycles",
    "extract_variables",
    "find_all_paths",
    "find_dead_ends",
    "find_unreachable_nodes",
    "reachable_nodes",
    "validate_graph",
]

"""Flow graph model, scene providers and the graph builder."""

from choicegraph.graph.builder import (
    ConditionalFrame,
    FlowGraphBuilder,
    PendingJump,
    SubroutineFrame,
    TraversalState,
    expression_value,
    infer_data_type,
)
from choicegraph.graph.model import (
    Achievement,
    DataType,
    Edge,
    GameMetadata,
    Graph,
    Node,
    NodeKind,
    StatChange,
    StatChartEntry,
    Variable,
)
from choicegraph.graph.options import BuilderOptions
from choicegraph.graph.scenes import (
    AsyncSceneProvider,
    DirectorySceneProvider,
    InMemorySceneProvider,
    SceneProvider,
)

__all__ = [
    "Achievement",
    "AsyncSceneProvider",
    "BuilderOptions",
    "ConditionalFrame",
    "DataType",
    "DirectorySceneProvider",
    "Edge",
    "FlowGraphBuilder",
    "GameMetadata",
    "Graph",
    "InMemorySceneProvider",
    "Node",
    "NodeKind",
    "PendingJump",
    "SceneProvider",
    "StatChange",
    "StatChartEntry",
    "SubroutineFrame",
    "TraversalState",
    "Variable",
    "expression_value",
    "infer_data_type",
]

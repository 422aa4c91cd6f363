"""Flow graph data model."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TypeAlias

from choicegraph.ast import AssignmentOperation, VariableScope
from choicegraph.text import SourcePosition

AttributeValue: TypeAlias = str | int | float | bool | None | list[str] | list[dict[str, str]]
Attributes: TypeAlias = dict[str, AttributeValue]


class NodeKind(StrEnum):
    SCENE_ENTRY = "scene_entry"
    TEXT = "text"
    CHOICE = "choice"
    OPTION = "option"
    CONDITIONAL = "conditional"
    MERGE = "merge"
    GOTO = "goto"
    GOSUB = "gosub"
    RETURN = "return"
    VARIABLE = "variable"
    SET = "set"
    LABEL = "label"
    FINISH = "finish"
    PAGE_BREAK = "page_break"
    COMMENT = "comment"
    METADATA = "metadata"
    UNKNOWN_COMMAND = "unknown_command"


class DataType(StrEnum):
    NUMERIC = "numeric"
    STRING = "string"
    BOOLEAN = "boolean"


@dataclass(frozen=True, slots=True)
class Node:
    id: str
    kind: NodeKind
    text: str
    attributes: Attributes
    position: SourcePosition | None = None

    @property
    def scene(self) -> str | None:
        return self.position.scene if self.position is not None else None


@dataclass(frozen=True, slots=True)
class StatChange:
    """One variable mutation carried by the edge entering a `set` node."""

    variable: str
    operation: AssignmentOperation
    value: str | int | float | bool | None

    @property
    def is_fairmath(self) -> bool:
        return self.operation.is_fairmath


@dataclass(frozen=True, slots=True)
class Edge:
    source: str
    target: str
    condition: str | None = None
    stat_changes: tuple[StatChange, ...] = ()
    attributes: Attributes = field(default_factory=dict)
    position: SourcePosition | None = None


@dataclass(frozen=True, slots=True)
class Variable:
    name: str
    scope: VariableScope
    data_type: DataType
    initial_value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Achievement:
    id: str
    name: str
    visibility: str
    points: int
    description: str = ""
    earned_description: str = ""


@dataclass(frozen=True, slots=True)
class StatChartEntry:
    """One `*stat_chart` row, e.g. `percent leadership Leadership`."""

    display: str
    variable: str
    label: str


@dataclass(slots=True)
class GameMetadata:
    title: str | None = None
    author: str | None = None
    scene_list: list[str] = field(default_factory=list)
    variables: dict[str, Variable] = field(default_factory=dict)
    achievements: list[Achievement] = field(default_factory=list)
    stat_charts: list[tuple[StatChartEntry, ...]] = field(default_factory=list)


class Graph:
    """Directed flow graph over every processed scene.

    Invariants:
    - node ids (`node_<n>`) are assigned monotonically and never reused
    - every edge's source and target exist in `nodes` (checked on insertion)
    - label keys are scene-qualified: `"<scene>:<label>"`
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self._outgoing: dict[str, list[Edge]] = {}
        self._incoming: dict[str, list[Edge]] = {}
        self._entry_points: dict[str, str] = {}
        self._labels: dict[str, str] = {}
        self._next_id = 0
        self.metadata = GameMetadata()

    @property
    def nodes(self) -> Mapping[str, Node]:
        return self._nodes

    @property
    def edges(self) -> Sequence[Edge]:
        return self._edges

    @property
    def entry_points(self) -> Mapping[str, str]:
        return self._entry_points

    @property
    def labels(self) -> Mapping[str, str]:
        return self._labels

    @staticmethod
    def label_key(scene: str, label: str) -> str:
        return f"{scene}:{label}"

    def add_node(
        self,
        kind: NodeKind,
        text: str = "",
        attributes: Attributes | None = None,
        position: SourcePosition | None = None,
    ) -> Node:
        node = Node(
            id=f"node_{self._next_id}",
            kind=kind,
            text=text,
            attributes=dict(attributes or {}),
            position=position,
        )
        self._next_id += 1
        self._nodes[node.id] = node
        self._outgoing[node.id] = []
        self._incoming[node.id] = []
        return node

    def add_edge(
        self,
        source: str,
        target: str,
        *,
        condition: str | None = None,
        stat_changes: tuple[StatChange, ...] = (),
        attributes: Attributes | None = None,
        position: SourcePosition | None = None,
    ) -> Edge:
        if source not in self._nodes:
            raise ValueError(f"Edge source {source!r} is not a node of this graph")
        if target not in self._nodes:
            raise ValueError(f"Edge target {target!r} is not a node of this graph")
        edge = Edge(
            source=source,
            target=target,
            condition=condition,
            stat_changes=stat_changes,
            attributes=dict(attributes or {}),
            position=position,
        )
        self._edges.append(edge)
        self._outgoing[source].append(edge)
        self._incoming[target].append(edge)
        return edge

    def update_attributes(self, node_id: str, **attributes: AttributeValue) -> Node:
        node = self.node(node_id)
        updated = replace(node, attributes={**node.attributes, **attributes})
        self._nodes[node_id] = updated
        return updated

    def set_entry_point(self, scene: str, node_id: str) -> None:
        self.node(node_id)
        self._entry_points[scene] = node_id

    def set_label(self, scene: str, label: str, node_id: str) -> bool:
        """Register a label; returns `False` when it replaced an earlier definition."""
        self.node(node_id)
        key = self.label_key(scene, label)
        is_new = key not in self._labels
        self._labels[key] = node_id
        return is_new

    def resolve_label(self, scene: str, label: str) -> str | None:
        return self._labels.get(self.label_key(scene, label))

    def node(self, node_id: str) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise KeyError(f"Unknown node id {node_id!r}") from None

    def outgoing(self, node_id: str) -> list[Edge]:
        return list(self._outgoing.get(node_id, ()))

    def incoming(self, node_id: str) -> list[Edge]:
        return list(self._incoming.get(node_id, ()))

    def successors(self, node_id: str) -> list[str]:
        return [edge.target for edge in self._outgoing.get(node_id, ())]

    def nodes_of_kind(self, kind: NodeKind) -> list[Node]:
        return [node for node in self._nodes.values() if node.kind == kind]

    def has_edge(self, source: str, target: str) -> bool:
        return any(edge.target == target for edge in self._outgoing.get(source, ()))

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

import pytest

from choicegraph.diagnostics import (
    BUILDER_UNRESOLVED_REFERENCE,
    PARSER_UNEXPECTED_TOKEN,
    collect_diagnostics,
    diagnostics_with_code,
    has_errors,
)
from choicegraph.errors import ScriptSyntaxError
from choicegraph.graph import Graph, NodeKind
from choicegraph.text import SourcePosition, measure_indent, split_lines


def test_graph_assigns_sequential_ids() -> None:
    graph = Graph()

    first = graph.add_node(NodeKind.TEXT, "One")
    second = graph.add_node(NodeKind.TEXT, "Two")

    assert (first.id, second.id) == ("node_0", "node_1")
    assert len(graph) == 2
    assert list(graph) == [first, second]


def test_graph_rejects_edges_to_unknown_nodes() -> None:
    graph = Graph()
    node = graph.add_node(NodeKind.TEXT)

    with pytest.raises(ValueError, match="'node_7' is not a node"):
        graph.add_edge(node.id, "node_7")
    with pytest.raises(ValueError, match="source 'node_7'"):
        graph.add_edge("node_7", node.id)
    assert graph.edges == []


def test_graph_adjacency() -> None:
    graph = Graph()
    a = graph.add_node(NodeKind.CHOICE)
    b = graph.add_node(NodeKind.OPTION, "B")
    c = graph.add_node(NodeKind.OPTION, "C")
    graph.add_edge(a.id, b.id, condition="x")
    graph.add_edge(a.id, c.id)

    assert graph.successors(a.id) == [b.id, c.id]
    assert [edge.condition for edge in graph.outgoing(a.id)] == ["x", None]
    assert [edge.source for edge in graph.incoming(c.id)] == [a.id]
    assert graph.has_edge(a.id, b.id) and not graph.has_edge(b.id, a.id)
    assert graph.nodes_of_kind(NodeKind.OPTION) == [b, c]


def test_graph_labels_are_scene_qualified() -> None:
    graph = Graph()
    one = graph.add_node(NodeKind.LABEL, "camp")
    two = graph.add_node(NodeKind.LABEL, "camp")

    assert graph.set_label("startup", "camp", one.id) is True
    assert graph.set_label("chapter", "camp", two.id) is True
    assert graph.resolve_label("startup", "camp") == one.id
    assert graph.resolve_label("chapter", "camp") == two.id
    assert graph.resolve_label("epilogue", "camp") is None
    assert Graph.label_key("chapter", "camp") == "chapter:camp"


def test_update_attributes_replaces_node() -> None:
    graph = Graph()
    node = graph.add_node(NodeKind.GOTO, "*goto x", {"label": "x"})

    updated = graph.update_attributes(node.id, dangling=True)

    assert updated.attributes == {"label": "x", "dangling": True}
    assert graph.node(node.id) is updated
    assert node.attributes == {"label": "x"}


def test_unknown_node_lookup_raises() -> None:
    with pytest.raises(KeyError, match="node_3"):
        Graph().node("node_3")


@pytest.mark.parametrize(
    ("line", "level", "mixed"),
    [("text", 0.0, False), ("\ttext", 1.0, False), ("  text", 1.0, False), ("\t  text", 2.0, True)],
    ids=["none", "tab", "spaces", "mixed"],
)
def test_measure_indent(line: str, level: float, mixed: bool) -> None:
    measure = measure_indent(line)

    assert measure.level == level
    assert measure.is_mixed is mixed


def test_split_lines_normalises_newlines() -> None:
    assert split_lines("\ufeffa\r\nb\rc\n") == ["a", "b", "c", ""]


def test_source_position() -> None:
    position = SourcePosition("startup", 4, 2, 1.5)

    assert position.describe() == "startup:5:2:1.5"
    assert str(SourcePosition.scene_start("chapter")) == "chapter:1:0:0"
    with pytest.raises(ValueError, match="cannot be negative"):
        SourcePosition("startup", -1)


def test_diagnostic_helpers() -> None:
    position = SourcePosition("startup", 0)
    warning = BUILDER_UNRESOLVED_REFERENCE.at(position, "Target: label 'startup:x'.")
    error = PARSER_UNEXPECTED_TOKEN.at(None)

    diagnostics = collect_diagnostics([warning], (error,))

    assert warning.message.endswith("Target: label 'startup:x'.")
    assert warning.describe().startswith("WARNING BUILDER_UNRESOLVED_REFERENCE at startup:1:0:0")
    assert error.describe() == "ERROR PARSER_UNEXPECTED_TOKEN at <graph>: Unexpected token"
    assert has_errors(diagnostics) is True
    assert has_errors([warning]) is False
    assert diagnostics_with_code(diagnostics, "PARSER_UNEXPECTED_TOKEN") == [error]


def test_errors_carry_position() -> None:
    error = ScriptSyntaxError("Expected expression", SourcePosition("startup", 2, 4))

    assert str(error) == "Expected expression at startup:3:4:0"
    assert error.message == "Expected expression"
    assert error.position == SourcePosition("startup", 2, 4)

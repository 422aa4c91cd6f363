from collections.abc import Mapping

import pytest

from choicegraph.analysis import (
    condition_identifiers,
    detect_cycles,
    extract_variables,
    find_all_paths,
    find_dead_ends,
    find_unreachable_nodes,
    reachable_nodes,
    validate_graph,
)
from choicegraph.graph import FlowGraphBuilder, Graph, InMemorySceneProvider, NodeKind
from tests._shared_cases import CHOICE_SCENE, IF_ELSE_SCENE


def build(scenes: Mapping[str, str]) -> Graph:
    return FlowGraphBuilder(InMemorySceneProvider(scenes)).build()


def test_label_loop_is_detected_as_cycle() -> None:
    graph = build({"startup": "*label loop\nAgain.\n*goto loop\n"})

    label = graph.nodes_of_kind(NodeKind.LABEL)[0].id
    text = graph.nodes_of_kind(NodeKind.TEXT)[0].id
    goto = graph.nodes_of_kind(NodeKind.GOTO)[0].id
    assert detect_cycles(graph) == [[label, text, goto, label]]


def test_acyclic_graph_has_no_cycles() -> None:
    assert detect_cycles(build({"startup": CHOICE_SCENE, "city": "*finish\n"})) == []


def test_gosub_return_is_reported_as_cycle() -> None:
    graph = build({"startup": "*gosub sub\n*finish\n*label sub\n*return\n"})

    cycles = detect_cycles(graph)
    assert len(cycles) == 1
    assert cycles[0][0] == cycles[0][-1]


def test_text_after_finish_is_unreachable() -> None:
    graph = build({"startup": "*finish\nOrphan text.\n"})

    orphan = graph.nodes_of_kind(NodeKind.TEXT)[0].id
    assert find_unreachable_nodes(graph) == [orphan]
    assert orphan not in reachable_nodes(graph)


def test_every_scene_entry_is_a_root() -> None:
    graph = build({"startup": "*finish\n*goto_scene never\n", "never": "*finish\n"})

    assert graph.entry_points["never"] in reachable_nodes(graph)
    assert [graph.node(node_id).kind for node_id in find_unreachable_nodes(graph)] == [NodeKind.GOTO]


def test_dead_ends_exempt_finish_and_jumps() -> None:
    graph = build({"startup": "Hello.\n*choice\n  #Wait.\n    Waited.\n  #Go.\n    *goto nowhere\n"})

    dead_ends = [graph.node(node_id) for node_id in find_dead_ends(graph)]
    assert [node.kind for node in dead_ends] == [NodeKind.MERGE]


def test_trailing_prose_is_a_dead_end() -> None:
    graph = build({"startup": "Hello.\n"})

    assert find_dead_ends(graph) == [graph.nodes_of_kind(NodeKind.TEXT)[0].id]


def test_all_paths_through_if_else() -> None:
    graph = build({"startup": IF_ELSE_SCENE, "rich": "*finish\n", "poor": "*finish\n"})
    start = graph.entry_points["startup"]
    merge = graph.nodes_of_kind(NodeKind.MERGE)[0].id

    paths = find_all_paths(graph, start, merge)
    assert len(paths) == 2
    assert all(path[0] == start and path[-1] == merge for path in paths)
    assert len({path[2] for path in paths}) == 2
    assert len(find_all_paths(graph, start, merge, limit=1)) == 1


def test_all_paths_edge_cases() -> None:
    graph = build({"startup": "*finish\nOrphan.\n"})
    start = graph.entry_points["startup"]
    orphan = graph.nodes_of_kind(NodeKind.TEXT)[0].id

    assert find_all_paths(graph, start, start) == [[start]]
    assert find_all_paths(graph, start, orphan) == []
    with pytest.raises(KeyError, match="node_99"):
        find_all_paths(graph, start, "node_99")


def test_all_paths_skip_cycles() -> None:
    graph = build({"startup": "*label top\n*if again\n  *goto top\nDone.\n"})
    start = graph.entry_points["startup"]
    done = graph.nodes_of_kind(NodeKind.TEXT)[0].id

    assert len(find_all_paths(graph, start, done)) == 1


@pytest.mark.parametrize(
    ("condition", "names"),
    [
        ("gold > 5", ["gold"]),
        ('name = "Bob and Alice" and not(brave)', ["name", "brave"]),
        ("not((a) or (b)) and (a)", ["a", "b"]),
        ("round(score / 2) modulo 3 = TRUE", ["score"]),
        ("level >= 10", ["level"]),
    ],
    ids=["simple", "string_literal", "repeated", "keywords", "numbers"],
)
def test_condition_identifiers(condition: str, names: list[str]) -> None:
    assert condition_identifiers(condition) == names


def test_variable_usage_is_collected() -> None:
    graph = build({"startup": "*create gold 10\n*if gold > 5\n  *set luck 1\n*set gold -1\n"})
    variables = extract_variables(graph)

    assert list(variables) == ["gold", "luck"]
    gold = variables["gold"]
    assert len(gold.declarations) == 1
    assert len(gold.assignments) == 1
    assert len(gold.usages) == 1
    assert gold.usages[0].count("->") == 1
    assert gold.undeclared is False
    assert variables["luck"].undeclared is True


def test_validate_graph_reports_issues() -> None:
    report = validate_graph(build({"startup": "*if rich\n  *set gold 5\n*finish\nOrphan.\n"}))

    assert report.undeclared_variables == ("gold", "rich")
    assert len(report.unreachable) == 1
    assert report.dead_ends == report.unreachable
    assert report.is_valid is False
    assert "Variable used without declaration: rich" in report.issues
    assert report.issues[0].startswith("Unreachable node: ")


def test_validate_clean_graph() -> None:
    report = validate_graph(build({"startup": CHOICE_SCENE, "city": "The city.\n*finish\n"}))

    assert report.cycles == ()
    assert report.issues == []
    assert report.is_valid is True

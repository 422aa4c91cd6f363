"""Read-only analysis passes over a finished flow graph."""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from choicegraph.graph import Graph, NodeKind

IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\b[a-zA-Z_]\w*\b")
STRING_LITERAL_PATTERN: Final[re.Pattern[str]] = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")

CONDITION_KEYWORDS: Final[frozenset[str]] = frozenset({"and", "or", "not", "true", "false", "round", "modulo"})
"""Words in condition text that are never variable references."""

DEAD_END_EXEMPT: Final[frozenset[NodeKind]] = frozenset({NodeKind.FINISH, NodeKind.GOTO, NodeKind.GOSUB})
"""Node kinds allowed to have no outgoing edge (jumps may be dangling while a story is authored)."""


@dataclass(frozen=True, slots=True)
class VariableUsage:
    """Where one variable is declared, assigned and read.

    Declarations and assignments are node ids; usages are `source->target`
    edge keys whose condition mentions the variable.
    """

    name: str
    declarations: tuple[str, ...]
    assignments: tuple[str, ...]
    usages: tuple[str, ...]

    @property
    def undeclared(self) -> bool:
        return not self.declarations and bool(self.assignments or self.usages)


@dataclass(frozen=True, slots=True)
class GraphReport:
    cycles: tuple[tuple[str, ...], ...]
    unreachable: tuple[str, ...]
    dead_ends: tuple[str, ...]
    variables: dict[str, VariableUsage]

    @property
    def undeclared_variables(self) -> tuple[str, ...]:
        return tuple(name for name, usage in self.variables.items() if usage.undeclared)

    @property
    def issues(self) -> list[str]:
        issues: list[str] = []
        issues.extend(f"Unreachable node: {node_id}" for node_id in self.unreachable)
        issues.extend(f"Dead end: {node_id}" for node_id in self.dead_ends)
        issues.extend(f"Variable used without declaration: {name}" for name in self.undeclared_variables)
        return issues

    @property
    def is_valid(self) -> bool:
        return not self.issues


def detect_cycles(graph: Graph) -> list[list[str]]:
    """Find cycles with a recursion-stack DFS.

    Each cycle is the path suffix starting at the revisited node, closed by
    that node again: `[a, b, a]`.
    """
    cycles: list[list[str]] = []
    visited: set[str] = set()

    for root in graph.nodes:
        if root in visited:
            continue
        path: list[str] = [root]
        on_stack: set[str] = {root}
        visited.add(root)
        stack: list[Iterator[str]] = [iter(graph.successors(root))]

        while stack:
            successor = next(stack[-1], None)
            if successor is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue
            if successor in on_stack:
                start = path.index(successor)
                cycles.append([*path[start:], successor])
                continue
            if successor in visited:
                continue
            visited.add(successor)
            on_stack.add(successor)
            path.append(successor)
            stack.append(iter(graph.successors(successor)))

    return cycles


def reachable_nodes(graph: Graph) -> set[str]:
    """Node ids reachable from any scene entry point."""
    seen: set[str] = set(graph.entry_points.values())
    queue = deque(seen)
    while queue:
        node_id = queue.popleft()
        for successor in graph.successors(node_id):
            if successor not in seen:
                seen.add(successor)
                queue.append(successor)
    return seen


def find_unreachable_nodes(graph: Graph) -> list[str]:
    reachable = reachable_nodes(graph)
    return [node_id for node_id in graph.nodes if node_id not in reachable]


def find_dead_ends(graph: Graph) -> list[str]:
    return [
        node.id
        for node in graph
        if node.kind not in DEAD_END_EXEMPT and not graph.outgoing(node.id)
    ]


def condition_identifiers(condition: str) -> list[str]:
    """Identifier-like words in a condition, string literals and keywords excluded."""
    stripped = STRING_LITERAL_PATTERN.sub(" ", condition)
    names: list[str] = []
    for match in IDENTIFIER_PATTERN.finditer(stripped):
        name = match.group(0)
        if name.lower() in CONDITION_KEYWORDS or name in names:
            continue
        names.append(name)
    return names


def extract_variables(graph: Graph) -> dict[str, VariableUsage]:
    declarations: dict[str, list[str]] = {}
    assignments: dict[str, list[str]] = {}
    usages: dict[str, list[str]] = {}

    for node in graph:
        name = node.attributes.get("name")
        if not isinstance(name, str) or not name:
            continue
        if node.kind == NodeKind.VARIABLE:
            declarations.setdefault(name, []).append(node.id)
        elif node.kind == NodeKind.SET:
            assignments.setdefault(name, []).append(node.id)

    for edge in graph.edges:
        if edge.condition is None:
            continue
        for name in condition_identifiers(edge.condition):
            usages.setdefault(name, []).append(f"{edge.source}->{edge.target}")

    names = [*declarations, *(n for n in assignments if n not in declarations)]
    names.extend(n for n in usages if n not in declarations and n not in assignments)
    return {
        name: VariableUsage(
            name=name,
            declarations=tuple(declarations.get(name, ())),
            assignments=tuple(assignments.get(name, ())),
            usages=tuple(usages.get(name, ())),
        )
        for name in names
    }


def find_all_paths(graph: Graph, start: str, end: str, *, limit: int | None = None) -> list[list[str]]:
    """All simple paths from `start` to `end`; stops after `limit` paths when given."""
    graph.node(start)
    graph.node(end)
    if start == end:
        return [[start]]

    paths: list[list[str]] = []
    path: list[str] = [start]
    on_path: set[str] = {start}
    stack: list[Iterator[str]] = [iter(graph.successors(start))]

    while stack:
        if limit is not None and len(paths) >= limit:
            break
        successor = next(stack[-1], None)
        if successor is None:
            stack.pop()
            on_path.discard(path.pop())
            continue
        if successor in on_path:
            continue
        if successor == end:
            paths.append([*path, successor])
            continue
        on_path.add(successor)
        path.append(successor)
        stack.append(iter(graph.successors(successor)))

    return paths


def validate_graph(graph: Graph) -> GraphReport:
    return GraphReport(
        cycles=tuple(tuple(cycle) for cycle in detect_cycles(graph)),
        unreachable=tuple(find_unreachable_nodes(graph)),
        dead_ends=tuple(find_dead_ends(graph)),
        variables=extract_variables(graph),
    )

"""Shared debug printers for lexer/parser/graph tests."""

from __future__ import annotations

import os

from choicegraph.diagnostics import Diagnostic
from choicegraph.graph import Graph
from choicegraph.lexer import TokenStream, dump_tokens

PRINT_TOKENS = os.getenv("PRINT_TOKENS", "0").lower() in {"1", "true", "yes", "on"}
PRINT_GRAPH = os.getenv("PRINT_GRAPH", "0").lower() in {"1", "true", "yes", "on"}
PRINT_SOURCE = os.getenv("PRINT_SOURCE", "0").lower() in {"1", "true", "yes", "on"}
PRINT_DIAGNOSTICS = os.getenv("PRINT_DIAGNOSTICS", "0").lower() in {
    "1",
    "true",
    "yes",
    "on",
}


def debug_print_source(test_name: str, source: str) -> None:
    if not PRINT_SOURCE:
        return
    print(f"\n===== {test_name} SOURCE =====")
    print(source)


def debug_dump_tokens(test_name: str, source: str, stream: TokenStream) -> None:
    if not PRINT_TOKENS:
        return
    debug_print_source(test_name, source)
    print(f"\n===== {test_name} TOKENS =====")
    dump_tokens(stream)


def debug_dump_graph(test_name: str, graph: Graph) -> None:
    if not PRINT_GRAPH:
        return
    print(f"\n===== {test_name} GRAPH =====")
    for node in graph:
        print(f"{node.id:<10} {node.kind.value:<16} {node.text!r}")
        for edge in graph.outgoing(node.id):
            condition = f" if {edge.condition}" if edge.condition is not None else ""
            print(f"    -> {edge.target}{condition}")


def debug_dump_diagnostics(test_name: str, diagnostics: list[Diagnostic]) -> None:
    if not PRINT_DIAGNOSTICS:
        return
    print(f"===== {test_name} DIAGNOSTICS =====")
    if not diagnostics:
        print("(none)")
        return
    for diagnostic in diagnostics:
        print(diagnostic.describe())

"""Pipeline run result carriers for tool entrypoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from choicegraph.diagnostics import Diagnostic, has_errors
from choicegraph.graph import BuilderOptions, Graph
from choicegraph.parser import ParsedScene, ParserOptions

if TYPE_CHECKING:
    from choicegraph.analysis import GraphReport


@dataclass(frozen=True, slots=True)
class SceneParseResult:
    """Parse of one scene's text, kept with the options that produced it."""

    source_text: str
    parsed: ParsedScene
    options: ParserOptions

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self.parsed.diagnostics)

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)


@dataclass(frozen=True, slots=True)
class GraphBuildResult:
    """A finished graph and the warnings collected while building it."""

    graph: Graph
    diagnostics: list[Diagnostic]
    options: BuilderOptions
    entry_scene: str

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


@dataclass(frozen=True, slots=True)
class CheckRunResult:
    """Result of building a graph and running every analysis pass over it."""

    build: GraphBuildResult
    report: GraphReport
    diagnostics: list[Diagnostic]
    has_errors: bool

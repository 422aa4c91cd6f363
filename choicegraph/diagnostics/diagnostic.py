"""Diagnostics core types."""

from dataclasses import dataclass
from typing import Literal

from choicegraph.text import SourcePosition

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the scanner, parser and graph builder."""

    code: str
    message: str
    position: SourcePosition | None
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None

    def describe(self) -> str:
        where = self.position.describe() if self.position is not None else "<graph>"
        return f"{self.severity.upper()} {self.code} at {where}: {self.message}"

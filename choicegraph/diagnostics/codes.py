"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final

from choicegraph.diagnostics.diagnostic import Diagnostic, Severity
from choicegraph.text import SourcePosition


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None

    def at(self, position: SourcePosition | None, detail: str | None = None) -> "Diagnostic":
        """Instantiate this code at `position`, appending `detail` to the message."""
        message = self.message if detail is None else f"{self.message} {detail}"
        return Diagnostic(
            code=self.code,
            message=message,
            position=position,
            severity=self.severity,
            hint=self.hint,
            category=self.category,
        )


LEXER_MIXED_INDENTATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_MIXED_INDENTATION",
    message="Inconsistent indentation: tabs and spaces are mixed in this scene.",
    hint="Indent every line of a scene with either tabs or spaces.",
    severity="warning",
    category="lexer",
)

LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote character it was opened with.",
    severity="warning",
    category="lexer",
)

LEXER_UNEXPECTED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNEXPECTED_CHARACTER",
    message="Skipping character that cannot start an expression token.",
    severity="warning",
    category="lexer",
)

PARSER_INDENTATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INDENTATION",
    message="Indentation does not match the level this block requires.",
    hint="Indent the body of a block deeper than the command that opens it.",
    severity="warning",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

BUILDER_UNRESOLVED_REFERENCE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="BUILDER_UNRESOLVED_REFERENCE",
    message="Jump target could not be resolved.",
    hint="Check the label or scene name; the jump is kept as a dangling node.",
    severity="warning",
    category="builder",
)

BUILDER_INVALID_DECLARATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="BUILDER_INVALID_DECLARATION",
    message="Malformed variable command.",
    hint="Use `*create name value`, `*temp name [value]` or `*set name value`.",
    severity="warning",
    category="builder",
)

BUILDER_UNSUPPORTED_COMMAND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="BUILDER_UNSUPPORTED_COMMAND",
    message="Unsupported command kept as an opaque node.",
    severity="warning",
    category="builder",
)

BUILDER_SCENE_NOT_FOUND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="BUILDER_SCENE_NOT_FOUND",
    message="Scene is referenced but the scene provider does not have it.",
    severity="warning",
    category="builder",
)

BUILDER_DUPLICATE_LABEL: Final[DiagnosticSpec] = DiagnosticSpec(
    code="BUILDER_DUPLICATE_LABEL",
    message="Label is defined more than once in this scene; the last definition wins.",
    severity="warning",
    category="builder",
)

BUILDER_INVALID_ACHIEVEMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="BUILDER_INVALID_ACHIEVEMENT",
    message="Invalid achievement syntax. Expected `*achievement <id> visible|hidden <points> <name>`.",
    severity="warning",
    category="builder",
)

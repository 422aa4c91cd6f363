"""Diagnostics."""

from choicegraph.diagnostics.codes import (
    BUILDER_DUPLICATE_LABEL,
    BUILDER_INVALID_ACHIEVEMENT,
    BUILDER_INVALID_DECLARATION,
    BUILDER_SCENE_NOT_FOUND,
    BUILDER_UNRESOLVED_REFERENCE,
    BUILDER_UNSUPPORTED_COMMAND,
    LEXER_MIXED_INDENTATION,
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
    PARSER_INDENTATION,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
)
from choicegraph.diagnostics.diagnostic import Diagnostic, Severity
from choicegraph.diagnostics.report import collect_diagnostics, diagnostics_with_code, has_errors

__all__ = [
    "BUILDER_DUPLICATE_LABEL",
    "BUILDER_INVALID_ACHIEVEMENT",
    "BUILDER_INVALID_DECLARATION",
    "BUILDER_SCENE_NOT_FOUND",
    "BUILDER_UNRESOLVED_REFERENCE",
    "BUILDER_UNSUPPORTED_COMMAND",
    "LEXER_MIXED_INDENTATION",
    "LEXER_UNEXPECTED_CHARACTER",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_INDENTATION",
    "PARSER_UNEXPECTED_TOKEN",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "diagnostics_with_code",
    "has_errors",
]

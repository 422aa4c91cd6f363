"""Lexer."""

from choicegraph.lexer.expressions import tokenize_expression
from choicegraph.lexer.lexer import (
    MultiLineBlock,
    Scanner,
    ScannerState,
    ScanMode,
    Scene,
    TokenStream,
    dump_tokens,
    scan_scene,
)
from choicegraph.lexer.tokens import (
    COMMAND_KEYWORDS,
    EXPRESSION_TAIL_COMMANDS,
    MULTI_LINE_COMMANDS,
    OPTION_PREFIX_COMMANDS,
    TEXT_TAIL_COMMANDS,
    Operator,
    Token,
    TokenKind,
)

__all__ = [
    "COMMAND_KEYWORDS",
    "EXPRESSION_TAIL_COMMANDS",
    "MULTI_LINE_COMMANDS",
    "OPTION_PREFIX_COMMANDS",
    "TEXT_TAIL_COMMANDS",
    "MultiLineBlock",
    "Operator",
    "ScanMode",
    "Scanner",
    "ScannerState",
    "Scene",
    "Token",
    "TokenKind",
    "TokenStream",
    "dump_tokens",
    "scan_scene",
    "tokenize_expression",
]

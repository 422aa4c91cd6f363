"""Indentation-scoped recursive-descent parser."""

from choicegraph.parser.grammar import (
    parse_block,
    parse_body,
    parse_choice,
    parse_expression,
    parse_if,
    parse_option,
    parse_statement,
    parse_statements,
)
from choicegraph.parser.options import ParseMode, ParserOptions
from choicegraph.parser.parse import ParsedScene, parse_scene, resolve_parser_options
from choicegraph.parser.parser import SYNCHRONIZE_BOUNDARIES, Parser, ParserProgress

__all__ = [
    "SYNCHRONIZE_BOUNDARIES",
    "ParseMode",
    "ParsedScene",
    "Parser",
    "ParserOptions",
    "ParserProgress",
    "parse_block",
    "parse_body",
    "parse_choice",
    "parse_expression",
    "parse_if",
    "parse_option",
    "parse_scene",
    "parse_statement",
    "parse_statements",
    "resolve_parser_options",
]

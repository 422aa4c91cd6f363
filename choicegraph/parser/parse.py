"""High-level parse entrypoint for one scanned scene."""

from dataclasses import dataclass

from choicegraph.ast import Statement
from choicegraph.diagnostics import Diagnostic, collect_diagnostics
from choicegraph.lexer import TokenStream
from choicegraph.parser.grammar import parse_statements
from choicegraph.parser.options import ParseMode, ParserOptions
from choicegraph.parser.parser import Parser


@dataclass(frozen=True, slots=True)
class ParsedScene:
    """Statements of one scene plus scanner and parser diagnostics."""

    scene: str
    statements: tuple[Statement, ...]
    diagnostics: tuple[Diagnostic, ...]


def resolve_parser_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def parse_scene(
    stream: TokenStream,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ParsedScene:
    """Parse a token stream into statements.

    Raises `ScriptSyntaxError` on grammar violations unless the options enable
    error recovery, and `StructuralError` for unbalanced `*elseif`/`*else`/`*endif`.
    """
    resolved_options = resolve_parser_options(options=options, mode=mode)
    parser = Parser(stream, options=resolved_options)
    statements = parse_statements(parser)
    return ParsedScene(
        scene=stream.scene,
        statements=tuple(statements),
        diagnostics=tuple(collect_diagnostics(stream.diagnostics, parser.diagnostics)),
    )

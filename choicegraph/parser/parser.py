"""Token-cursor parser core with indentation scoping."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from choicegraph.diagnostics import Diagnostic
from choicegraph.errors import ScriptSyntaxError
from choicegraph.lexer import Token, TokenKind, TokenStream
from choicegraph.parser.options import ParserOptions

SYNCHRONIZE_BOUNDARIES: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.RETURN,
        TokenKind.GOTO,
        TokenKind.GOTO_SCENE,
        TokenKind.SCENE_END,
    }
)
"""Tokens where best-effort parsing can safely resume."""


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside statement loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.peek().describe()}")


class Parser:
    """Recursive-descent cursor over one scene's tokens.

    Blocks have no delimiters: `child_scope` and `sibling_scope` compare the
    next token's indent with the indent of the command that opened the block.
    """

    def __init__(self, tokens: TokenStream | Sequence[Token], options: ParserOptions | None = None) -> None:
        if isinstance(tokens, TokenStream):
            tokens = tokens.tokens
        if not tokens or tokens[-1].kind != TokenKind.SCENE_END:
            raise ValueError("Token sequence must end with SCENE_END")
        self._tokens = tuple(tokens)
        self._options = options or ParserOptions()
        self._position = 1 if self._tokens[0].kind == TokenKind.SCENE_START else 0
        self._diagnostics: list[Diagnostic] = []

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def position(self) -> int:
        return self._position

    @property
    def scene(self) -> str:
        return self._tokens[-1].scene

    @property
    def is_at_end(self) -> bool:
        return self.peek().kind == TokenKind.SCENE_END

    def peek(self, n: int = 0) -> Token:
        index = min(self._position + n, len(self._tokens) - 1)
        return self._tokens[index]

    def previous(self) -> Token:
        return self._tokens[max(self._position - 1, 0)]

    def check(
        self,
        kind: TokenKind,
        *,
        require_same_line: bool = False,
        require_same_indent: bool = False,
    ) -> bool:
        """Whether the next token is `kind`, optionally on the line / at the indent of the previous token."""
        token = self.peek()
        if token.kind != kind:
            return False
        previous = self.previous()
        if require_same_line and token.line != previous.line:
            return False
        if require_same_indent and token.indent != previous.indent:
            return False
        return True

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != TokenKind.SCENE_END:
            self._position += 1
        return token

    def match(self, *kinds: TokenKind) -> bool:
        if self.peek().kind in kinds:
            self.advance()
            return True
        return False

    def consume(self, kind: TokenKind, message: str, *, require_same_line: bool = False) -> Token:
        if self.check(kind, require_same_line=require_same_line):
            return self.advance()
        raise self.syntax_error(message)

    def syntax_error(self, message: str, token: Token | None = None) -> ScriptSyntaxError:
        token = token or self.peek()
        return ScriptSyntaxError(f"{message}; found {token.kind.name}", token.position)

    def child_scope(self, parent_indent: float) -> bool:
        return not self.is_at_end and self.peek().indent > parent_indent

    def sibling_scope(self, parent_indent: float) -> bool:
        return not self.is_at_end and self.peek().indent >= parent_indent

    def same_scope(self, indent: float) -> bool:
        """A sibling that is not also a child: the next token sits exactly at `indent`."""
        return self.sibling_scope(indent) and not self.child_scope(indent)

    def on_line_of(self, token: Token) -> bool:
        """Whether the next token sits on the same source line as `token`."""
        return not self.is_at_end and self.peek().line == token.line

    def synchronize(self) -> None:
        """Skip ahead to the next `*return`, `*goto`, `*goto_scene` or the end of the scene."""
        self.advance()
        while self.peek().kind not in SYNCHRONIZE_BOUNDARIES:
            self.advance()

    def warn(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def error(self, diagnostic: Diagnostic) -> None:
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.code == diagnostic.code and previous.position == diagnostic.position:
                return
        self._diagnostics.append(diagnostic)

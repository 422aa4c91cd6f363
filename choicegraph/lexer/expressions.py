"""Expression sub-tokenizer for command arguments and option markup."""

from typing import Final

from choicegraph.diagnostics import (
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
    Diagnostic,
)
from choicegraph.lexer.tokens import Operator, Token, TokenKind
from choicegraph.text import SourcePosition

# Longest markers first: `$!!{` must win over `$!{`, which must win over `${`.
_MARKERS: Final[tuple[tuple[str, TokenKind, Operator | None], ...]] = (
    ("$!!{", TokenKind.OPEN_PRINT_CAPITALISE_ALL, None),
    ("$!{", TokenKind.OPEN_PRINT_CAPITALISE_FIRST, None),
    ("%+", TokenKind.ARITHMETIC_OPERATOR, Operator.FAIRMATH_ADD),
    ("%-", TokenKind.ARITHMETIC_OPERATOR, Operator.FAIRMATH_SUBTRACT),
    (">=", TokenKind.COMPARISON_OPERATOR, Operator.GREATER_EQUAL),
    ("<=", TokenKind.COMPARISON_OPERATOR, Operator.LESS_EQUAL),
    ("!=", TokenKind.COMPARISON_OPERATOR, Operator.NOT_EQUALS),
    ("@{", TokenKind.OPEN_MULTI_REPLACE, None),
    ("${", TokenKind.OPEN_PRINT, None),
)

_SINGLE_CHAR: Final[dict[str, tuple[TokenKind, Operator | None]]] = {
    "+": (TokenKind.ARITHMETIC_OPERATOR, Operator.ADD),
    "-": (TokenKind.ARITHMETIC_OPERATOR, Operator.SUBTRACT),
    "*": (TokenKind.ARITHMETIC_OPERATOR, Operator.MULTIPLY),
    "/": (TokenKind.ARITHMETIC_OPERATOR, Operator.DIVIDE),
    "%": (TokenKind.ARITHMETIC_OPERATOR, Operator.MODULO),
    "&": (TokenKind.ARITHMETIC_OPERATOR, Operator.CONCAT),
    "=": (TokenKind.COMPARISON_OPERATOR, Operator.EQUALS),
    ">": (TokenKind.COMPARISON_OPERATOR, Operator.GREATER),
    "<": (TokenKind.COMPARISON_OPERATOR, Operator.LESS),
    "(": (TokenKind.LPAREN, None),
    ")": (TokenKind.RPAREN, None),
    "|": (TokenKind.MULTI_REPLACE_SEPARATOR, None),
    "}": (TokenKind.CLOSE_BRACE, None),
}

_WORD_OPERATORS: Final[dict[str, tuple[TokenKind, Operator]]] = {
    "and": (TokenKind.LOGICAL_OPERATOR, Operator.AND),
    "or": (TokenKind.LOGICAL_OPERATOR, Operator.OR),
    "not": (TokenKind.UNARY_OPERATOR, Operator.NOT),
    "round": (TokenKind.UNARY_OPERATOR, Operator.ROUND),
    "modulo": (TokenKind.ARITHMETIC_OPERATOR, Operator.MODULO),
}


def _is_digit(ch: str) -> bool:
    # ASCII only: `str.isdigit` also accepts superscripts that `int` rejects.
    return "0" <= ch <= "9"


def tokenize_expression(
    text: str,
    *,
    scene: str,
    line: int,
    column: int = 0,
    indent: float = 0.0,
    offset: int = 0,
) -> tuple[list[Token], list[Diagnostic]]:
    """Break argument text into literal, identifier and operator tokens.

    `column`/`offset` locate `text[0]` inside the scene so every emitted token
    keeps its real position. Never raises: unknown characters are skipped and
    reported.
    """
    scanner = _ExpressionScanner(text, scene=scene, line=line, column=column, indent=indent, offset=offset)
    return scanner.run()


class _ExpressionScanner:
    def __init__(self, text: str, *, scene: str, line: int, column: int, indent: float, offset: int) -> None:
        self._text = text
        self._scene = scene
        self._line = line
        self._column = column
        self._indent = indent
        self._offset = offset
        self._cursor = 0
        self._tokens: list[Token] = []
        self._diagnostics: list[Diagnostic] = []

    def run(self) -> tuple[list[Token], list[Diagnostic]]:
        while not self._is_eof:
            ch = self._current_char()

            if ch == " " or ch == "\t":
                self._cursor += 1
                continue

            if _is_digit(ch):
                self._lex_number()
                continue

            if ch == '"' or ch == "'":
                self._lex_string(ch)
                continue

            if self._lex_marker():
                continue

            single = _SINGLE_CHAR.get(ch)
            if single is not None:
                kind, operator = single
                self._emit(kind, self._cursor, ch, operator)
                self._cursor += 1
                continue

            if ch.isalpha() or ch == "_":
                self._lex_word()
                continue

            self._diagnostics.append(LEXER_UNEXPECTED_CHARACTER.at(self._position(self._cursor), f"Found {ch!r}."))
            self._cursor += 1

        return self._tokens, self._diagnostics

    @property
    def _is_eof(self) -> bool:
        return self._cursor >= len(self._text)

    def _current_char(self) -> str:
        if self._is_eof:
            return "\0"
        return self._text[self._cursor]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._cursor + ahead
        if index >= len(self._text):
            return "\0"
        return self._text[index]

    def _position(self, start: int) -> SourcePosition:
        return SourcePosition(self._scene, self._line, self._column + start, self._indent)

    def _emit(self, kind: TokenKind, start: int, text: str, value: object = None) -> None:
        self._tokens.append(
            Token(
                kind=kind,
                scene=self._scene,
                line=self._line,
                column=self._column + start,
                indent=self._indent,
                offset=self._offset + start,
                text=text,
                value=value,
            )
        )

    def _lex_marker(self) -> bool:
        for marker, kind, operator in _MARKERS:
            if self._text.startswith(marker, self._cursor):
                self._emit(kind, self._cursor, marker, operator)
                self._cursor += len(marker)
                return True
        return False

    def _lex_number(self) -> None:
        start = self._cursor
        saw_dot = False
        while not self._is_eof:
            ch = self._current_char()
            if _is_digit(ch):
                self._cursor += 1
                continue
            if ch == "." and not saw_dot and _is_digit(self._peek_char()):
                saw_dot = True
                self._cursor += 1
                continue
            break
        raw = self._text[start : self._cursor]
        value: int | float = float(raw) if saw_dot else int(raw)
        self._emit(TokenKind.NUMBER, start, raw, value)

    def _lex_string(self, quote: str) -> None:
        start = self._cursor
        self._cursor += 1
        chars: list[str] = []
        closed = False
        while not self._is_eof:
            ch = self._current_char()
            if ch == quote:
                self._cursor += 1
                closed = True
                break
            if ch == "\\" and self._cursor + 1 < len(self._text):
                self._cursor += 1
                ch = self._current_char()
            chars.append(ch)
            self._cursor += 1

        if not closed:
            self._diagnostics.append(LEXER_UNTERMINATED_STRING.at(self._position(start)))

        self._emit(TokenKind.STRING, start, self._text[start : self._cursor], "".join(chars))

    def _lex_word(self) -> None:
        start = self._cursor
        self._cursor += 1
        while not self._is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_":
                self._cursor += 1
                continue
            break
        word = self._text[start : self._cursor]
        lowered = word.lower()

        if lowered == "true" or lowered == "false":
            self._emit(TokenKind.BOOLEAN, start, word, lowered == "true")
            return

        word_operator = _WORD_OPERATORS.get(lowered)
        if word_operator is not None:
            kind, operator = word_operator
            self._emit(kind, start, word, operator)
            return

        self._emit(TokenKind.IDENTIFIER, start, word, word)

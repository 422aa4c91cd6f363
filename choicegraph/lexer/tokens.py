"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Final

from choicegraph.text import SourcePosition


class TokenKind(IntEnum):
    # -------------------------
    # Scene sentinels
    # -------------------------
    SCENE_START = 1
    SCENE_END = 2

    # -------------------------
    # Narrative text
    # -------------------------
    PROSE = 10
    CHOICE_OPTION = 11  # `#Option text`
    COMMENT = 12

    # -------------------------
    # Commands (one per `*keyword`)
    # -------------------------
    CHOICE = 20
    FAKE_CHOICE = 21
    HIDE_REUSE = 22
    DISABLE_REUSE = 23
    ALLOW_REUSE = 24
    SELECTABLE_IF = 25
    IF = 26
    ELSEIF = 27
    ELSE = 28
    ENDIF = 29
    LABEL = 30
    GOTO = 31
    GOTO_SCENE = 32
    GOSUB = 33
    GOSUB_SCENE = 34
    RETURN = 35
    CREATE = 36
    TEMP = 37
    SET = 38
    FINISH = 39
    PAGE_BREAK = 40
    INPUT_TEXT = 41
    TITLE = 42
    AUTHOR = 43
    SCENE_LIST = 44  # multi-line
    ACHIEVEMENT = 45  # multi-line
    STAT_CHART = 46  # multi-line
    UNKNOWN_COMMAND = 49

    # -------------------------
    # Expression tokens
    # -------------------------
    NUMBER = 60
    STRING = 61
    BOOLEAN = 62
    IDENTIFIER = 63
    LPAREN = 64
    RPAREN = 65
    ARITHMETIC_OPERATOR = 66
    COMPARISON_OPERATOR = 67
    LOGICAL_OPERATOR = 68
    UNARY_OPERATOR = 69

    # -------------------------
    # Multi-replace / print markup
    # -------------------------
    OPEN_MULTI_REPLACE = 80  # @{
    OPEN_PRINT = 81  # ${
    OPEN_PRINT_CAPITALISE_FIRST = 82  # $!{
    OPEN_PRINT_CAPITALISE_ALL = 83  # $!!{
    MULTI_REPLACE_SEPARATOR = 84  # |
    CLOSE_BRACE = 85  # }

    @property
    def is_expression(self) -> bool:
        return TokenKind.NUMBER <= self <= TokenKind.UNARY_OPERATOR

    @property
    def is_markup(self) -> bool:
        return TokenKind.OPEN_MULTI_REPLACE <= self <= TokenKind.CLOSE_BRACE

    @property
    def is_command(self) -> bool:
        return TokenKind.CHOICE <= self <= TokenKind.UNKNOWN_COMMAND


class Operator(StrEnum):
    """Operator vocabulary shared by expression tokens and the expression AST."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    CONCAT = "&"
    FAIRMATH_ADD = "%+"
    FAIRMATH_SUBTRACT = "%-"
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    AND = "and"
    OR = "or"
    NOT = "not"
    ROUND = "round"


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token.

    `text` holds the raw lexeme or the free-text argument of a command
    (label name, option text, comment body). `value` holds the decoded literal
    (`int`/`float`/`str`/`bool`) or the `Operator` of operator tokens.
    `entries` carries the harvested lines of multi-line commands and `markup`
    the sub-tokenized interpolation found inside option text.
    """

    kind: TokenKind
    scene: str
    line: int
    column: int
    indent: float
    offset: int
    text: str = ""
    value: object = None
    entries: tuple[str, ...] = ()
    markup: tuple["Token", ...] = ()

    @property
    def position(self) -> SourcePosition:
        return SourcePosition(self.scene, self.line, self.column, self.indent)

    @property
    def operator(self) -> Operator | None:
        return self.value if isinstance(self.value, Operator) else None

    def describe(self) -> str:
        return f"{self.kind.name} at {self.position.describe()}"


COMMAND_KEYWORDS: Final[dict[str, TokenKind]] = {
    "choice": TokenKind.CHOICE,
    "fake_choice": TokenKind.FAKE_CHOICE,
    "hide_reuse": TokenKind.HIDE_REUSE,
    "disable_reuse": TokenKind.DISABLE_REUSE,
    "allow_reuse": TokenKind.ALLOW_REUSE,
    "selectable_if": TokenKind.SELECTABLE_IF,
    "if": TokenKind.IF,
    "elseif": TokenKind.ELSEIF,
    "elsif": TokenKind.ELSEIF,
    "else": TokenKind.ELSE,
    "endif": TokenKind.ENDIF,
    "label": TokenKind.LABEL,
    "goto": TokenKind.GOTO,
    "goto_scene": TokenKind.GOTO_SCENE,
    "gosub": TokenKind.GOSUB,
    "gosub_scene": TokenKind.GOSUB_SCENE,
    "return": TokenKind.RETURN,
    "create": TokenKind.CREATE,
    "temp": TokenKind.TEMP,
    "set": TokenKind.SET,
    "finish": TokenKind.FINISH,
    "page_break": TokenKind.PAGE_BREAK,
    "input_text": TokenKind.INPUT_TEXT,
    "title": TokenKind.TITLE,
    "author": TokenKind.AUTHOR,
    "comment": TokenKind.COMMENT,
    "scene_list": TokenKind.SCENE_LIST,
    "achievement": TokenKind.ACHIEVEMENT,
    "stat_chart": TokenKind.STAT_CHART,
}
"""Bit-exact command spellings (without the leading `*`)."""

EXPRESSION_TAIL_COMMANDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.SELECTABLE_IF,
        TokenKind.IF,
        TokenKind.ELSEIF,
        TokenKind.LABEL,
        TokenKind.GOTO,
        TokenKind.GOTO_SCENE,
        TokenKind.GOSUB,
        TokenKind.GOSUB_SCENE,
        TokenKind.CREATE,
        TokenKind.TEMP,
        TokenKind.SET,
        TokenKind.INPUT_TEXT,
    }
)
"""Commands whose argument text is scanned with the expression sub-tokenizer."""

TEXT_TAIL_COMMANDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.CHOICE,
        TokenKind.FAKE_CHOICE,
        TokenKind.ELSE,
        TokenKind.ENDIF,
        TokenKind.RETURN,
        TokenKind.FINISH,
        TokenKind.PAGE_BREAK,
        TokenKind.TITLE,
        TokenKind.AUTHOR,
        TokenKind.UNKNOWN_COMMAND,
    }
)
"""Commands whose rest-of-line is kept verbatim as the token's `text`."""

OPTION_PREFIX_COMMANDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.HIDE_REUSE,
        TokenKind.DISABLE_REUSE,
        TokenKind.ALLOW_REUSE,
    }
)
"""Commands that may be followed by further commands or a `#option` on the same line."""

MULTI_LINE_COMMANDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.SCENE_LIST,
        TokenKind.ACHIEVEMENT,
        TokenKind.STAT_CHART,
    }
)
"""Commands that harvest the indented lines that follow them."""

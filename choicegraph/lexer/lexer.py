"""Modal scene scanner."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from choicegraph.diagnostics import LEXER_MIXED_INDENTATION, Diagnostic
from choicegraph.lexer.expressions import tokenize_expression
from choicegraph.lexer.tokens import (
    COMMAND_KEYWORDS,
    EXPRESSION_TAIL_COMMANDS,
    MULTI_LINE_COMMANDS,
    OPTION_PREFIX_COMMANDS,
    TEXT_TAIL_COMMANDS,
    Token,
    TokenKind,
)
from choicegraph.text import IndentMeasure, SourcePosition, measure_indent, split_lines

MARKUP_OPENERS: Final[tuple[str, ...]] = ("$!!{", "$!{", "${", "@{")
"""Interpolation markers that trigger sub-tokenizing option text."""


@dataclass(frozen=True, slots=True)
class Scene:
    """One named unit of source text."""

    name: str
    source_text: str


@dataclass(frozen=True, slots=True)
class TokenStream:
    """Tokens of one scene, bracketed by `SCENE_START`/`SCENE_END`, plus scanner warnings."""

    scene: str
    tokens: tuple[Token, ...]
    diagnostics: tuple[Diagnostic, ...]

    def __len__(self) -> int:
        return len(self.tokens)

    def kinds(self) -> list[TokenKind]:
        return [token.kind for token in self.tokens]


class ScanMode(StrEnum):
    INDENTATION = "indentation"
    PROSE = "prose"
    TOKEN = "token"
    EXPRESSION = "expression"
    COMMENT = "comment"
    CHOICE_OPTION = "choice_option"
    PROSE_TO_EOL = "prose_to_eol"


@dataclass(slots=True)
class MultiLineBlock:
    """An open `*scene_list`/`*achievement`/`*stat_chart` block collecting indented lines."""

    kind: TokenKind
    header: str
    line: int
    column: int
    indent: float
    offset: int
    entries: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ScannerState:
    """Everything the scanner mutates while walking a scene.

    Indent is per line: `indent` is overwritten at the start of every line and
    never accumulated. `column` is the cursor into `text`, the current line;
    `command`/`command_column` hold the `*command` the current mode belongs to.
    """

    mode: ScanMode = ScanMode.INDENTATION
    line: int = 0
    line_offset: int = 0
    text: str = ""
    column: int = 0
    indent: float = 0.0
    indent_char: str | None = None
    reported_mixed_indent: bool = False
    command: TokenKind | None = None
    command_word: str = ""
    command_column: int = 0
    prose_lines: list[str] = field(default_factory=list)
    prose_start: tuple[int, int, float, int] | None = None
    block: MultiLineBlock | None = None


class Scanner:
    """Single-pass modal scanner for one scene.

    Every line starts in `INDENTATION`; each mode handler consumes part of the
    line and returns the next mode, or `None` once the line is used up.
    `*` and `#` are structural only as the first non-blank character of a line
    (or after an option prefix or inline condition on the same line); every
    other line is consumed whole as prose.
    """

    def __init__(self, scene: Scene) -> None:
        self._scene = scene
        self._state = ScannerState()
        self._tokens: list[Token] = []
        self._diagnostics: list[Diagnostic] = []
        self._handlers: dict[ScanMode, Callable[[], ScanMode | None]] = {
            ScanMode.INDENTATION: self._scan_indentation,
            ScanMode.TOKEN: self._scan_token,
            ScanMode.PROSE: self._scan_prose,
            ScanMode.PROSE_TO_EOL: self._scan_prose_to_eol,
            ScanMode.COMMENT: self._scan_comment,
            ScanMode.CHOICE_OPTION: self._scan_option,
            ScanMode.EXPRESSION: self._scan_expression,
        }

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def state(self) -> ScannerState:
        return self._state

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    def scan(self) -> TokenStream:
        lines = split_lines(self._scene.source_text)
        self._emit(TokenKind.SCENE_START, line=0, column=0, offset=0)

        offset = 0
        for index, text in enumerate(lines):
            self._state.line = index
            self._state.line_offset = offset
            self._scan_line(text)
            offset += len(text) + 1

        self._close_block()
        self._flush_prose()
        last_line = max(len(lines) - 1, 0)
        self._state.indent = 0.0
        self._emit(TokenKind.SCENE_END, line=last_line, column=0, offset=max(offset - 1, 0))

        return TokenStream(
            scene=self._scene.name,
            tokens=tuple(self._tokens),
            diagnostics=tuple(self._diagnostics),
        )

    def _scan_line(self, text: str) -> None:
        state = self._state
        state.text = text.rstrip()
        state.column = 0
        mode: ScanMode | None = ScanMode.INDENTATION
        while mode is not None:
            state.mode = mode
            mode = self._handlers[mode]()

    # -------------------------
    # Indentation
    # -------------------------

    def _scan_indentation(self) -> ScanMode | None:
        state = self._state
        measure = measure_indent(state.text)
        if measure.width >= len(state.text):
            if state.block is None and state.prose_lines:
                state.prose_lines.append("")
            return None

        state.indent = measure.level
        state.column = measure.width
        self._check_indent_characters(measure)

        block = state.block
        if block is not None:
            if measure.level > block.indent:
                block.entries.append(state.text[state.column :])
                return None
            self._close_block()
        return ScanMode.TOKEN

    def _check_indent_characters(self, measure: IndentMeasure) -> None:
        state = self._state
        if measure.width == 0 or state.reported_mixed_indent:
            return

        mixed = measure.is_mixed
        if not mixed:
            char = "\t" if measure.uses_tabs else " "
            if state.indent_char is None:
                state.indent_char = char
            elif state.indent_char != char:
                mixed = True

        if mixed:
            state.reported_mixed_indent = True
            self._diagnostics.append(LEXER_MIXED_INDENTATION.at(self._position(0)))

    # -------------------------
    # Token dispatch
    # -------------------------

    def _scan_token(self) -> ScanMode | None:
        """Decide what starts at the cursor: an option, a `*command` or prose."""
        state = self._state
        text = state.text
        while state.column < len(text) and text[state.column] in " \t":
            state.column += 1
        if state.column >= len(text):
            return None

        head = text[state.column]
        if head == "#":
            self._flush_prose()
            return ScanMode.CHOICE_OPTION
        if head == "*":
            word = _command_word(text[state.column :])
            if word:
                self._flush_prose()
                return self._enter_command(word)
        return ScanMode.PROSE

    def _enter_command(self, word: str) -> ScanMode | None:
        state = self._state
        kind = COMMAND_KEYWORDS.get(word, TokenKind.UNKNOWN_COMMAND)
        state.command = kind
        state.command_word = word
        state.command_column = state.column
        state.column += 1 + len(word)

        if kind == TokenKind.COMMENT:
            return ScanMode.COMMENT
        if kind in MULTI_LINE_COMMANDS:
            state.block = MultiLineBlock(
                kind=kind,
                header=state.text[state.column :].strip(),
                line=state.line,
                column=state.command_column,
                indent=state.indent,
                offset=state.line_offset + state.command_column,
            )
            return None
        if kind in OPTION_PREFIX_COMMANDS:
            self._emit(kind, column=state.command_column)
            return ScanMode.TOKEN
        if kind in EXPRESSION_TAIL_COMMANDS:
            return ScanMode.EXPRESSION
        if kind in TEXT_TAIL_COMMANDS:
            return ScanMode.PROSE_TO_EOL
        raise ValueError(f"No scan mode for {kind.name}")

    # -------------------------
    # Prose
    # -------------------------

    def _scan_prose(self) -> None:
        state = self._state
        text = state.text[state.column :]
        if state.prose_start is not None and state.prose_start[2] != state.indent:
            # A change of indent starts a new block of prose.
            self._flush_prose()
        if state.prose_start is None:
            state.prose_start = (state.line, state.column, state.indent, state.line_offset + state.column)
        state.prose_lines.append(text)
        state.column = len(state.text)

    def _flush_prose(self) -> None:
        state = self._state
        start = state.prose_start
        lines = state.prose_lines
        state.prose_start = None
        state.prose_lines = []
        if start is None:
            return

        while lines and not lines[-1]:
            lines.pop()
        text = "\n".join(lines)
        if not text.strip():
            return

        line, column, indent, offset = start
        self._tokens.append(
            Token(
                kind=TokenKind.PROSE,
                scene=self._scene.name,
                line=line,
                column=column,
                indent=indent,
                offset=offset,
                text=text,
            )
        )

    # -------------------------
    # Options and commands
    # -------------------------

    def _scan_option(self) -> None:
        state = self._state
        text = state.text[state.column :]
        option_text = text[1:].strip()
        markup = self._scan_markup(text, state.column) if any(m in text for m in MARKUP_OPENERS) else ()
        self._emit(TokenKind.CHOICE_OPTION, column=state.column, text=option_text, markup=markup)
        state.column = len(state.text)

    def _scan_markup(self, text: str, column: int) -> tuple[Token, ...]:
        tokens: list[Token] = []
        cursor = 0
        while True:
            start = _find_markup_start(text, cursor)
            if start < 0:
                break
            end = _find_markup_end(text, start)
            region_tokens, diagnostics = tokenize_expression(
                text[start:end],
                scene=self._scene.name,
                line=self._state.line,
                column=column + start,
                indent=self._state.indent,
                offset=self._state.line_offset + column + start,
            )
            tokens.extend(region_tokens)
            self._diagnostics.extend(diagnostics)
            cursor = end
        return tuple(tokens)

    def _scan_comment(self) -> None:
        state = self._state
        self._emit(TokenKind.COMMENT, column=state.command_column, text=state.text[state.column :].strip())
        state.column = len(state.text)

    def _scan_prose_to_eol(self) -> None:
        state = self._state
        kind = state.command or TokenKind.UNKNOWN_COMMAND
        rest = state.text[state.column :].strip()
        value = state.command_word if kind == TokenKind.UNKNOWN_COMMAND else None
        self._emit(kind, column=state.command_column, text=rest, value=value)
        state.column = len(state.text)

    def _scan_expression(self) -> ScanMode | None:
        """Sub-tokenize a command argument, then continue with whatever trails it."""
        state = self._state
        kind = state.command or TokenKind.UNKNOWN_COMMAND
        start = state.column
        end = _expression_end(state.text, start)
        argument = state.text[start:end]
        self._emit(kind, column=state.command_column, text=argument.strip())

        tokens, diagnostics = tokenize_expression(
            argument,
            scene=self._scene.name,
            line=state.line,
            column=start,
            indent=state.indent,
            offset=state.line_offset + start,
        )
        self._tokens.extend(tokens)
        self._diagnostics.extend(diagnostics)
        state.column = end
        return ScanMode.TOKEN if state.text[end:].strip() else None


    def _close_block(self) -> None:
        block = self._state.block
        if block is None:
            return
        self._state.block = None
        self._tokens.append(
            Token(
                kind=block.kind,
                scene=self._scene.name,
                line=block.line,
                column=block.column,
                indent=block.indent,
                offset=block.offset,
                text=block.header,
                entries=tuple(block.entries),
            )
        )

    # -------------------------
    # Helpers
    # -------------------------

    def _position(self, column: int) -> SourcePosition:
        return SourcePosition(self._scene.name, self._state.line, column, self._state.indent)

    def _emit(
        self,
        kind: TokenKind,
        *,
        column: int,
        line: int | None = None,
        offset: int | None = None,
        text: str = "",
        value: object = None,
        markup: tuple[Token, ...] = (),
    ) -> None:
        state = self._state
        self._tokens.append(
            Token(
                kind=kind,
                scene=self._scene.name,
                line=state.line if line is None else line,
                column=column,
                indent=state.indent,
                offset=state.line_offset + column if offset is None else offset,
                text=text,
                value=value,
                markup=markup,
            )
        )


def _command_word(text: str) -> str:
    """Return the command word following a leading `*`, or `""` if there is none."""
    end = 1
    while end < len(text) and (text[end].isalnum() or text[end] == "_"):
        end += 1
    return text[1:end]


def _expression_end(text: str, start: int) -> int:
    """Index where an expression tail stops: end of line, an option `#`, or another `*command`."""
    quote: str | None = None
    index = start
    while index < len(text):
        ch = text[index]
        if quote is not None:
            if ch == "\\":
                index += 2
                continue
            if ch == quote:
                quote = None
        elif ch == '"' or ch == "'":
            quote = ch
        elif ch == "#":
            return index
        elif ch == "*":
            word = _command_word(text[index:])
            if word in COMMAND_KEYWORDS:
                return index
        index += 1
    return len(text)


def _find_markup_start(text: str, start: int) -> int:
    found = [index for index in (text.find(marker, start) for marker in MARKUP_OPENERS) if index >= 0]
    return min(found) if found else -1


def _find_markup_end(text: str, start: int) -> int:
    """Index just past the `}` closing the markup region opened at `start`."""
    depth = 0
    for index in range(start, len(text)):
        ch = text[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return index + 1
    return len(text)


def scan_scene(scene: Scene) -> TokenStream:
    """Scan one scene into a token stream; never raises."""
    return Scanner(scene).scan()


def dump_tokens(stream: TokenStream) -> None:
    """Print a token stream with kind, position, text and value for debugging."""
    for i, tok in enumerate(stream.tokens):
        value = "" if tok.value is None else f" value={tok.value!r}"
        entries = f" entries={list(tok.entries)!r}" if tok.entries else ""
        print(f"{i:03d} {tok.kind.name:<28} at={tok.position.describe()} text={tok.text!r}{value}{entries}")
        for sub in tok.markup:
            print(f"      {sub.kind.name:<26} at={sub.position.describe()} text={sub.text!r}")

    if stream.diagnostics:
        print("\nDiagnostics:")
        for d in stream.diagnostics:
            print(f"- {d.describe()}")

from dataclasses import dataclass
from typing import Final

TAB_INDENT: Final[float] = 1.0
"""Indent contributed by one tab character."""

SPACE_INDENT: Final[float] = 0.5
"""Indent contributed by one space character."""


@dataclass(frozen=True, slots=True, order=True)
class SourcePosition:
    """Location of a token or statement inside one scene.

    Invariant:
    - line >= 0, column >= 0, indent >= 0

    Lines and columns are zero-based, matching python string indices.
    """

    scene: str
    line: int
    column: int = 0
    indent: float = 0.0

    def __post_init__(self):
        if self.line < 0 or self.column < 0:
            raise ValueError("SourcePosition line/column cannot be negative")
        if self.indent < 0:
            raise ValueError("SourcePosition indent cannot be negative")

    @staticmethod
    def scene_start(scene: str) -> "SourcePosition":
        """Position of the very first character of a scene."""
        return SourcePosition(scene, 0, 0, 0.0)

    def describe(self) -> str:
        """Render as `scene:line:column:indent` for error messages (1-based line)."""
        return f"{self.scene}:{self.line + 1}:{self.column}:{self.indent:g}"

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True, slots=True)
class IndentMeasure:
    """Fractional indent of one line plus the whitespace characters that produced it."""

    level: float
    width: int
    uses_tabs: bool
    uses_spaces: bool

    @property
    def is_mixed(self) -> bool:
        return self.uses_tabs and self.uses_spaces


ZERO_INDENT: Final[IndentMeasure] = IndentMeasure(0.0, 0, False, False)
"""Measure of a line that starts at column zero."""


def measure_indent(line: str) -> IndentMeasure:
    """Measure the leading tabs/spaces of `line` (tab = 1.0, space = 0.5)."""
    level = 0.0
    width = 0
    uses_tabs = False
    uses_spaces = False
    for ch in line:
        if ch == "\t":
            level += TAB_INDENT
            uses_tabs = True
        elif ch == " ":
            level += SPACE_INDENT
            uses_spaces = True
        else:
            break
        width += 1
    if width == 0:
        return ZERO_INDENT
    return IndentMeasure(level=level, width=width, uses_tabs=uses_tabs, uses_spaces=uses_spaces)


def split_lines(source: str) -> list[str]:
    """Split scene text into lines, normalising every `\\r\\n` and lone `\\r`."""
    normalized = source.replace("\r\n", "\n").replace("\r", "\n")
    if normalized.startswith("\ufeff"):
        normalized = normalized[1:]
    return normalized.split("\n")

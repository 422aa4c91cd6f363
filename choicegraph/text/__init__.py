"""Source positions and indentation measurement."""

from choicegraph.text.text import (
    SPACE_INDENT,
    TAB_INDENT,
    ZERO_INDENT,
    IndentMeasure,
    SourcePosition,
    measure_indent,
    split_lines,
)

__all__ = [
    "SPACE_INDENT",
    "TAB_INDENT",
    "ZERO_INDENT",
    "IndentMeasure",
    "SourcePosition",
    "measure_indent",
    "split_lines",
]

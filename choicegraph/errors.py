"""Fatal errors raised by the parser and the flow graph builder."""

from __future__ import annotations

from choicegraph.text import SourcePosition


class ChoiceScriptError(Exception):
    """Base exception for fatal toolchain errors."""

    def __init__(self, message: str, position: SourcePosition | None = None) -> None:
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} at {position.describe()}"
        super().__init__(message)


class ScriptSyntaxError(ChoiceScriptError):
    """Raised when a token does not fit the grammar at the current position."""


class StructuralError(ChoiceScriptError):
    """Raised for unbalanced structure: `*else` without `*if`, `*return` without `*gosub`."""


class SceneLoadError(ChoiceScriptError):
    """Raised by scene providers when a scene cannot be read."""

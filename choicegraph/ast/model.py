"""AST data model for ChoiceScript scenes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias
from enum import StrEnum

from choicegraph.lexer.tokens import Operator
from choicegraph.text import SourcePosition

# -------------------------
# Expressions
# -------------------------


@dataclass(frozen=True, slots=True)
class Literal:
    """Number, string or boolean literal."""

    value: int | float | str | bool
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Identifier:
    """Bare variable reference."""

    name: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Unary:
    operator: Operator
    operand: Expression
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Binary:
    left: Expression
    operator: Operator
    right: Expression
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Grouping:
    """Parenthesised expression, kept so rendering can reproduce the source shape."""

    inner: Expression
    position: SourcePosition


Expression: TypeAlias = Literal | Identifier | Unary | Binary | Grouping


# -------------------------
# Statement enums
# -------------------------


class ReusePolicy(StrEnum):
    HIDE = "hide_reuse"
    DISABLE = "disable_reuse"
    ALLOW = "allow_reuse"


class VariableScope(StrEnum):
    GLOBAL = "create"
    TEMPORARY = "temp"


class AssignmentOperation(StrEnum):
    """Classification of a `*set` operator; total and mutually exclusive."""

    SET = "set"
    ADD = "add"
    SUBTRACT = "subtract"
    FAIRMATH_ADD = "fairmath_add"
    FAIRMATH_SUBTRACT = "fairmath_subtract"

    @property
    def is_fairmath(self) -> bool:
        return self in (AssignmentOperation.FAIRMATH_ADD, AssignmentOperation.FAIRMATH_SUBTRACT)


# -------------------------
# Statements
# -------------------------


@dataclass(frozen=True, slots=True)
class Prose:
    text: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Choice:
    """`*choice`/`*fake_choice` block.

    The body holds `ChoiceOption`, `If` (whose branches hold further options)
    and `Comment` statements only.
    """

    is_fake: bool
    body: tuple[Statement, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class ChoiceOption:
    """`#Option` with its reuse policy and the two kinds of inline condition.

    `selectable_if` keeps the option visible but disabled when false;
    `condition` (from an inline `*if (...)`) hides it.
    """

    text: str
    reuse: ReusePolicy | None
    selectable_if: Expression | None
    condition: Expression | None
    body: tuple[Statement, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class ElseIf:
    condition: Expression
    body: tuple[Statement, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Else:
    body: tuple[Statement, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class If:
    """`*if` cascade: the `*if` branch, its sibling `*elseif` branches and an optional `*else`."""

    condition: Expression
    body: tuple[Statement, ...]
    elseifs: tuple[ElseIf, ...]
    else_branch: Else | None
    position: SourcePosition
    has_endif: bool = False

    @property
    def branch_count(self) -> int:
        return 1 + len(self.elseifs) + (1 if self.else_branch is not None else 0)


@dataclass(frozen=True, slots=True)
class Label:
    name: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class GotoLabel:
    label: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class GotoScene:
    scene: str
    label: str | None
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class GoSub:
    label: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class GoSubScene:
    scene: str
    label: str | None
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Return:
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class DeclareVariable:
    """`*create`/`*temp`. An empty `name` or missing initializer marks a malformed declaration."""

    scope: VariableScope
    name: str
    initializer: Expression | None
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class SetVariable:
    name: str
    operation: AssignmentOperation
    expression: Expression | None
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Finish:
    text: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class PageBreak:
    text: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class InputText:
    name: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Comment:
    text: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Title:
    text: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Author:
    text: str
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class SceneList:
    scenes: tuple[str, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class Achievement:
    """Raw `*achievement` header plus its indented description lines."""

    header: str
    lines: tuple[str, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class StatChart:
    lines: tuple[str, ...]
    position: SourcePosition


@dataclass(frozen=True, slots=True)
class UnknownCommand:
    name: str
    text: str
    position: SourcePosition


Statement: TypeAlias = (
    Prose
    | Choice
    | ChoiceOption
    | If
    | ElseIf
    | Else
    | Label
    | GotoLabel
    | GotoScene
    | GoSub
    | GoSubScene
    | Return
    | DeclareVariable
    | SetVariable
    | Finish
    | PageBreak
    | InputText
    | Comment
    | Title
    | Author
    | SceneList
    | Achievement
    | StatChart
    | UnknownCommand
)


__all__ = [
    "Achievement",
    "AssignmentOperation",
    "Author",
    "Binary",
    "Choice",
    "ChoiceOption",
    "Comment",
    "DeclareVariable",
    "Else",
    "ElseIf",
    "Expression",
    "Finish",
    "GoSub",
    "GoSubScene",
    "GotoLabel",
    "GotoScene",
    "Grouping",
    "Identifier",
    "If",
    "InputText",
    "Label",
    "Literal",
    "PageBreak",
    "Prose",
    "ReusePolicy",
    "Return",
    "SceneList",
    "SetVariable",
    "Statement",
    "StatChart",
    "Title",
    "Unary",
    "UnknownCommand",
    "VariableScope",
]

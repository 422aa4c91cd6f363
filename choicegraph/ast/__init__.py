"""Statement and expression trees for parsed scenes."""

from choicegraph.ast.model import (
    Achievement,
    AssignmentOperation,
    Author,
    Binary,
    Choice,
    ChoiceOption,
    Comment,
    DeclareVariable,
    Else,
    ElseIf,
    Expression,
    Finish,
    GoSub,
    GoSubScene,
    GotoLabel,
    GotoScene,
    Grouping,
    Identifier,
    If,
    InputText,
    Label,
    Literal,
    PageBreak,
    Prose,
    ReusePolicy,
    Return,
    SceneList,
    SetVariable,
    Statement,
    StatChart,
    Title,
    Unary,
    UnknownCommand,
    VariableScope,
)
from choicegraph.ast.render import condition_text, render_expression, render_literal

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
    "condition_text",
    "render_expression",
    "render_literal",
]

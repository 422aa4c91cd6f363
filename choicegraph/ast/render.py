"""Render expression trees back to ChoiceScript source text."""

from choicegraph.ast.model import Binary, Expression, Grouping, Identifier, Literal, Unary
from choicegraph.lexer.tokens import Operator


def render_literal(value: int | float | str | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return repr(value)


def render_expression(expression: Expression) -> str:
    match expression:
        case Literal(value=value):
            return render_literal(value)
        case Identifier(name=name):
            return name
        case Grouping(inner=inner):
            return f"({render_expression(inner)})"
        case Unary(operator=operator, operand=operand):
            if operator in (Operator.NOT, Operator.ROUND):
                if isinstance(operand, Grouping):
                    return f"{operator}{render_expression(operand)}"
                return f"{operator} {render_expression(operand)}"
            return f"{operator}{render_expression(operand)}"
        case Binary(left=left, operator=operator, right=right):
            return f"{render_expression(left)} {operator} {render_expression(right)}"
    raise TypeError(f"Unsupported expression node: {type(expression).__name__}")


def condition_text(expression: Expression) -> str:
    """Render a condition without its outermost parentheses: `(gold > 5)` -> `gold > 5`."""
    while isinstance(expression, Grouping):
        expression = expression.inner
    return render_expression(expression)

"""ChoiceScript grammar routines that build statement and expression trees."""

from collections.abc import Callable
from typing import Final, TypeAlias

from choicegraph.ast import (
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
from choicegraph.diagnostics import PARSER_INDENTATION, PARSER_UNEXPECTED_TOKEN
from choicegraph.errors import ScriptSyntaxError, StructuralError
from choicegraph.lexer import Operator, Token, TokenKind
from choicegraph.parser.parser import Parser, ParserProgress

ElementParser: TypeAlias = Callable[[Parser], Statement]

EQUALITY_OPERATORS: Final[frozenset[Operator]] = frozenset({Operator.EQUALS, Operator.NOT_EQUALS})
COMPARISON_OPERATORS: Final[frozenset[Operator]] = frozenset(
    {Operator.GREATER, Operator.GREATER_EQUAL, Operator.LESS, Operator.LESS_EQUAL}
)
TERM_OPERATORS: Final[frozenset[Operator]] = frozenset({Operator.ADD, Operator.SUBTRACT, Operator.CONCAT})
FACTOR_OPERATORS: Final[frozenset[Operator]] = frozenset({Operator.MULTIPLY, Operator.DIVIDE, Operator.MODULO})
PREFIX_OPERATORS: Final[frozenset[Operator]] = frozenset(
    {
        Operator.NOT,
        Operator.ROUND,
        Operator.SUBTRACT,
        Operator.ADD,
        Operator.FAIRMATH_ADD,
        Operator.FAIRMATH_SUBTRACT,
    }
)

SET_OPERATIONS: Final[dict[Operator, AssignmentOperation]] = {
    Operator.ADD: AssignmentOperation.ADD,
    Operator.SUBTRACT: AssignmentOperation.SUBTRACT,
    Operator.FAIRMATH_ADD: AssignmentOperation.FAIRMATH_ADD,
    Operator.FAIRMATH_SUBTRACT: AssignmentOperation.FAIRMATH_SUBTRACT,
}
"""`*set` operators with their own classification; `* / % &` fold into a plain SET."""

REUSE_PREFIXES: Final[dict[TokenKind, ReusePolicy]] = {
    TokenKind.HIDE_REUSE: ReusePolicy.HIDE,
    TokenKind.DISABLE_REUSE: ReusePolicy.DISABLE,
    TokenKind.ALLOW_REUSE: ReusePolicy.ALLOW,
}

OPTION_START: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.CHOICE_OPTION,
        TokenKind.SELECTABLE_IF,
        TokenKind.HIDE_REUSE,
        TokenKind.DISABLE_REUSE,
        TokenKind.ALLOW_REUSE,
    }
)


# -------------------------
# Blocks
# -------------------------


def parse_statements(parser: Parser) -> list[Statement]:
    """Parse every top-level statement of the scene."""
    return parse_block(parser, None, parse_statement)


def parse_block(parser: Parser, parent_indent: float | None, element: ElementParser) -> list[Statement]:
    """Parse `element`s while the next token is indented deeper than `parent_indent`.

    `parent_indent=None` parses to the end of the scene. With error recovery
    enabled, syntax errors become diagnostics and parsing resumes after
    `Parser.synchronize`.
    """
    statements: list[Statement] = []
    progress = ParserProgress()
    while not parser.is_at_end and (parent_indent is None or parser.child_scope(parent_indent)):
        progress.assert_progressing(parser)
        try:
            statements.append(element(parser))
        except ScriptSyntaxError as error:
            if not parser.options.recover_from_errors:
                raise
            parser.error(PARSER_UNEXPECTED_TOKEN.at(error.position, error.message))
            parser.synchronize()
    return statements


def parse_body(
    parser: Parser,
    opener: Token,
    element: ElementParser | None = None,
    *,
    require_body: bool = True,
) -> tuple[Statement, ...]:
    element = element or parse_statement
    if not parser.child_scope(opener.indent):
        if require_body and parser.options.warn_on_empty_blocks:
            parser.warn(
                PARSER_INDENTATION.at(
                    parser.peek().position,
                    f"Expected an indented body after {opener.kind.name} at {opener.position.describe()}.",
                )
            )
        return ()
    return tuple(parse_block(parser, opener.indent, element))


# -------------------------
# Statements
# -------------------------


def parse_statement(parser: Parser) -> Statement:
    token = parser.peek()
    match token.kind:
        case TokenKind.PROSE:
            parser.advance()
            return Prose(token.text, token.position)
        case TokenKind.COMMENT:
            parser.advance()
            return Comment(token.text, token.position)
        case TokenKind.CHOICE | TokenKind.FAKE_CHOICE:
            return parse_choice(parser)
        case TokenKind.IF:
            return parse_if(parser, parse_statement)
        case TokenKind.ELSEIF | TokenKind.ELSE | TokenKind.ENDIF:
            raise StructuralError(f"*{token.kind.name.lower()} without a matching *if", token.position)
        case TokenKind.LABEL:
            parser.advance()
            name = _expect_name(parser, token, "Expected a label name after *label")
            _expect_line_end(parser, token)
            return Label(name, token.position)
        case TokenKind.GOTO:
            parser.advance()
            label = _expect_name(parser, token, "Expected a label name after *goto")
            _expect_line_end(parser, token)
            return GotoLabel(label, token.position)
        case TokenKind.GOSUB:
            parser.advance()
            label = _expect_name(parser, token, "Expected a label name after *gosub")
            _skip_line(parser, token)
            return GoSub(label, token.position)
        case TokenKind.GOTO_SCENE | TokenKind.GOSUB_SCENE:
            return parse_scene_jump(parser)
        case TokenKind.RETURN:
            parser.advance()
            return Return(token.position)
        case TokenKind.CREATE | TokenKind.TEMP:
            return parse_declaration(parser)
        case TokenKind.SET:
            return parse_set(parser)
        case TokenKind.FINISH:
            parser.advance()
            return Finish(token.text, token.position)
        case TokenKind.PAGE_BREAK:
            parser.advance()
            return PageBreak(token.text, token.position)
        case TokenKind.INPUT_TEXT:
            parser.advance()
            name = _optional_name(parser, token)
            _skip_line(parser, token)
            return InputText(name, token.position)
        case TokenKind.TITLE:
            parser.advance()
            return Title(token.text, token.position)
        case TokenKind.AUTHOR:
            parser.advance()
            return Author(token.text, token.position)
        case TokenKind.SCENE_LIST:
            parser.advance()
            return SceneList(_scene_list_entries(token.entries), token.position)
        case TokenKind.ACHIEVEMENT:
            parser.advance()
            return Achievement(token.text, token.entries, token.position)
        case TokenKind.STAT_CHART:
            parser.advance()
            return StatChart(token.entries, token.position)
        case TokenKind.UNKNOWN_COMMAND:
            parser.advance()
            return UnknownCommand(str(token.value), token.text, token.position)
    raise parser.syntax_error("Unexpected token at start of statement")


def parse_choice(parser: Parser) -> Choice:
    token = parser.advance()
    is_fake = token.kind == TokenKind.FAKE_CHOICE

    def element(current: Parser) -> Statement:
        return parse_choice_item(current, is_fake=is_fake)

    body = parse_body(parser, token, element)
    return Choice(is_fake, body, token.position)


def parse_choice_item(parser: Parser, *, is_fake: bool = False) -> Statement:
    token = parser.peek()
    if token.kind == TokenKind.COMMENT:
        parser.advance()
        return Comment(token.text, token.position)
    if token.kind in OPTION_START or (token.kind == TokenKind.IF and _is_inline_option_condition(parser)):
        return parse_option(parser, is_fake=is_fake)
    if token.kind == TokenKind.IF:

        def element(current: Parser) -> Statement:
            return parse_choice_item(current, is_fake=is_fake)

        return parse_if(parser, element)
    raise parser.syntax_error("Expected a #option inside *choice")


def parse_option(parser: Parser, *, is_fake: bool = False) -> ChoiceOption:
    reuse: ReusePolicy | None = None
    selectable_if: Expression | None = None
    condition: Expression | None = None

    while True:
        token = parser.peek()
        if token.kind in REUSE_PREFIXES:
            parser.advance()
            reuse = REUSE_PREFIXES[token.kind]
        elif token.kind == TokenKind.SELECTABLE_IF:
            parser.advance()
            selectable_if = parse_expression(parser)
        elif token.kind == TokenKind.IF:
            parser.advance()
            condition = parse_expression(parser)
        else:
            break

    option = parser.consume(TokenKind.CHOICE_OPTION, "Expected #option text")
    body = parse_body(parser, option, require_body=not is_fake)
    return ChoiceOption(option.text, reuse, selectable_if, condition, body, option.position)


def parse_if(parser: Parser, element: ElementParser) -> If:
    token = parser.advance()
    condition = parse_expression(parser)
    _expect_line_end(parser, token)
    body = parse_body(parser, token, element)

    elseifs: list[ElseIf] = []
    while parser.check(TokenKind.ELSEIF) and parser.same_scope(token.indent):
        branch = parser.advance()
        branch_condition = parse_expression(parser)
        _expect_line_end(parser, branch)
        elseifs.append(ElseIf(branch_condition, parse_body(parser, branch, element), branch.position))

    else_branch: Else | None = None
    if parser.check(TokenKind.ELSE) and parser.same_scope(token.indent):
        branch = parser.advance()
        else_branch = Else(parse_body(parser, branch, element), branch.position)

    has_endif = parser.same_scope(token.indent) and parser.match(TokenKind.ENDIF)

    return If(condition, body, tuple(elseifs), else_branch, token.position, has_endif)


def parse_scene_jump(parser: Parser) -> GotoScene | GoSubScene:
    token = parser.advance()
    scene = _expect_name(parser, token, f"Expected a scene name after *{token.kind.name.lower()}")
    label: str | None = None
    if parser.check(TokenKind.IDENTIFIER, require_same_line=True):
        label = str(parser.advance().value)

    if token.kind == TokenKind.GOTO_SCENE:
        _expect_line_end(parser, token)
        return GotoScene(scene, label, token.position)
    _skip_line(parser, token)
    return GoSubScene(scene, label, token.position)


def parse_declaration(parser: Parser) -> DeclareVariable:
    token = parser.advance()
    scope = VariableScope.GLOBAL if token.kind == TokenKind.CREATE else VariableScope.TEMPORARY
    name = _optional_name(parser, token)
    initializer: Expression | None = None
    if name and parser.on_line_of(token) and parser.peek().kind.is_expression:
        initializer = parse_expression(parser)
    _skip_line(parser, token)
    return DeclareVariable(scope, name, initializer, token.position)


def parse_set(parser: Parser) -> SetVariable:
    token = parser.advance()
    name = _optional_name(parser, token)
    if not name or not (parser.on_line_of(token) and parser.peek().kind.is_expression):
        _skip_line(parser, token)
        return SetVariable(name, AssignmentOperation.SET, None, token.position)

    operation = AssignmentOperation.SET
    lead = parser.peek()
    operator = lead.operator if lead.kind == TokenKind.ARITHMETIC_OPERATOR else None

    if operator in SET_OPERATIONS:
        parser.advance()
        operation = SET_OPERATIONS[operator]
        expression = parse_expression(parser)
    elif operator is not None:
        # `*set gold *2` means `gold * 2`.
        parser.advance()
        operand = parse_expression(parser)
        expression = Binary(Identifier(name, token.position), operator, operand, lead.position)
    else:
        expression = parse_expression(parser)

    _expect_line_end(parser, token)
    return SetVariable(name, operation, expression, token.position)


# -------------------------
# Expressions
# -------------------------


def parse_expression(parser: Parser) -> Expression:
    return parse_logical(parser)


def parse_logical(parser: Parser) -> Expression:
    expression = parse_equality(parser)
    while parser.check(TokenKind.LOGICAL_OPERATOR):
        operator = parser.advance()
        right = parse_equality(parser)
        expression = Binary(expression, _operator(operator), right, operator.position)
    return expression


def parse_equality(parser: Parser) -> Expression:
    expression = parse_comparison(parser)
    while _at_operator(parser, TokenKind.COMPARISON_OPERATOR, EQUALITY_OPERATORS):
        operator = parser.advance()
        right = parse_comparison(parser)
        expression = Binary(expression, _operator(operator), right, operator.position)
    return expression


def parse_comparison(parser: Parser) -> Expression:
    expression = parse_term(parser)
    while _at_operator(parser, TokenKind.COMPARISON_OPERATOR, COMPARISON_OPERATORS):
        operator = parser.advance()
        right = parse_term(parser)
        expression = Binary(expression, _operator(operator), right, operator.position)
    return expression


def parse_term(parser: Parser) -> Expression:
    expression = parse_factor(parser)
    while _at_operator(parser, TokenKind.ARITHMETIC_OPERATOR, TERM_OPERATORS):
        operator = parser.advance()
        right = parse_factor(parser)
        expression = Binary(expression, _operator(operator), right, operator.position)
    return expression


def parse_factor(parser: Parser) -> Expression:
    expression = parse_unary(parser)
    while _at_operator(parser, TokenKind.ARITHMETIC_OPERATOR, FACTOR_OPERATORS):
        operator = parser.advance()
        right = parse_unary(parser)
        expression = Binary(expression, _operator(operator), right, operator.position)
    return expression


def parse_unary(parser: Parser) -> Expression:
    token = parser.peek()
    if token.kind in (TokenKind.UNARY_OPERATOR, TokenKind.ARITHMETIC_OPERATOR) and token.operator in PREFIX_OPERATORS:
        parser.advance()
        operand = parse_unary(parser)
        return Unary(_operator(token), operand, token.position)
    return parse_primary(parser)


def parse_primary(parser: Parser) -> Expression:
    token = parser.peek()
    if token.kind in (TokenKind.NUMBER, TokenKind.STRING, TokenKind.BOOLEAN):
        parser.advance()
        return Literal(token.value, token.position)  # type: ignore[arg-type]
    if token.kind == TokenKind.IDENTIFIER:
        parser.advance()
        return Identifier(str(token.value), token.position)
    if token.kind == TokenKind.LPAREN:
        parser.advance()
        inner = parse_expression(parser)
        parser.consume(TokenKind.RPAREN, "Expected ')' to close grouping")
        return Grouping(inner, token.position)
    raise parser.syntax_error("Expected expression")


# -------------------------
# Helpers
# -------------------------


def _operator(token: Token) -> Operator:
    operator = token.operator
    if operator is None:
        raise ValueError(f"Token {token.describe()} carries no operator")
    return operator


def _at_operator(parser: Parser, kind: TokenKind, operators: frozenset[Operator]) -> bool:
    token = parser.peek()
    return token.kind == kind and token.operator in operators


def _expect_name(parser: Parser, command: Token, message: str) -> str:
    if not (parser.on_line_of(command) and parser.peek().kind == TokenKind.IDENTIFIER):
        raise ScriptSyntaxError(f"{message}; found {parser.peek().kind.name}", command.position)
    return str(parser.advance().value)


def _optional_name(parser: Parser, command: Token) -> str:
    if parser.on_line_of(command) and parser.peek().kind == TokenKind.IDENTIFIER:
        return str(parser.advance().value)
    return ""


def _expect_line_end(parser: Parser, command: Token) -> None:
    token = parser.peek()
    if parser.on_line_of(command) and token.kind.is_expression:
        raise parser.syntax_error(f"Unexpected trailing argument after *{command.kind.name.lower()}")


def _skip_line(parser: Parser, command: Token) -> None:
    while parser.on_line_of(command) and parser.peek().kind.is_expression:
        parser.advance()


def _is_inline_option_condition(parser: Parser) -> bool:
    """Whether the `*if` at the cursor guards a `#option` written on the same line."""
    start = parser.peek()
    n = 1
    while True:
        token = parser.peek(n)
        if token.kind == TokenKind.SCENE_END or token.line != start.line:
            return False
        if token.kind == TokenKind.CHOICE_OPTION:
            return True
        if not (token.kind.is_expression or token.kind in OPTION_START):
            return False
        n += 1


def _scene_list_entries(entries: tuple[str, ...]) -> tuple[str, ...]:
    # A leading `$` marks a purchasable scene.
    names = (entry.removeprefix("$").strip() for entry in entries)
    return tuple(name for name in names if name)

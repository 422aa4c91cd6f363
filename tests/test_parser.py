import pytest

from choicegraph.ast import (
    AssignmentOperation,
    Binary,
    Choice,
    ChoiceOption,
    Comment,
    DeclareVariable,
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
    Prose,
    Return,
    ReusePolicy,
    SceneList,
    SetVariable,
    Statement,
    Unary,
    UnknownCommand,
    VariableScope,
    condition_text,
    render_expression,
)
from choicegraph.errors import ScriptSyntaxError, StructuralError
from choicegraph.lexer import Operator, Scene, TokenKind, scan_scene
from choicegraph.parser import ParsedScene, ParseMode, Parser, ParserOptions, parse_scene
from tests._debug import debug_dump_diagnostics
from tests._shared_cases import GOSUB_SCENE, PARSER_CASES, RICH_CHOICE_SCENE, SceneCase, _dedent


def parse(text: str, *, mode: ParseMode | None = None) -> ParsedScene:
    parsed = parse_scene(scan_scene(Scene("startup", text)), mode=mode)
    debug_dump_diagnostics("startup", list(parsed.diagnostics))
    return parsed


def single(text: str) -> Statement:
    (statement,) = parse(text).statements
    return statement


def set_expression(text: str) -> SetVariable:
    statement = single(text)
    assert isinstance(statement, SetVariable)
    return statement


@pytest.mark.parametrize("case", PARSER_CASES, ids=[case.name for case in PARSER_CASES])
def test_strict_mode_matches_expectation(case: SceneCase) -> None:
    stream = scan_scene(Scene(case.name, case.source))
    if case.strict_should_parse_cleanly:
        parsed = parse_scene(stream)
        assert parsed.scene == case.name
    else:
        with pytest.raises(ScriptSyntaxError):
            parse_scene(stream)


@pytest.mark.parametrize("case", PARSER_CASES, ids=[case.name for case in PARSER_CASES])
def test_permissive_mode_never_raises_syntax_errors(case: SceneCase) -> None:
    parsed = parse_scene(scan_scene(Scene(case.name, case.source)), mode=ParseMode.PERMISSIVE)

    has_parse_errors = any(d.code == "PARSER_UNEXPECTED_TOKEN" for d in parsed.diagnostics)
    assert has_parse_errors is not case.strict_should_parse_cleanly


def test_parse_scene_rejects_options_and_mode_together() -> None:
    stream = scan_scene(Scene("startup", "Hello.\n"))

    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        parse_scene(stream, ParserOptions(), mode=ParseMode.STRICT)


def test_parser_options_for_mode() -> None:
    assert ParserOptions.for_mode(ParseMode.PERMISSIVE).recover_from_errors is True
    assert ParserOptions.for_mode(ParseMode.STRICT).recover_from_errors is False
    assert ParserOptions().mode == ParseMode.STRICT


def test_parser_requires_scene_end() -> None:
    with pytest.raises(ValueError, match="SCENE_END"):
        Parser([])


def test_gosub_scene_statement_sequence() -> None:
    statements = parse(GOSUB_SCENE).statements

    assert [type(statement) for statement in statements] == [GoSub, Prose, Finish, Label, Prose, Return]
    assert statements[0] == GoSub("describe_room", statements[0].position)
    assert isinstance(statements[1], Prose)
    assert statements[1].text == "Back in the hall."


# -------------------------
# Expressions
# -------------------------


def test_multiplication_binds_tighter_than_addition() -> None:
    statement = set_expression("*set x 1 + 2 * 3\n")

    expression = statement.expression
    assert isinstance(expression, Binary)
    assert expression.operator == Operator.ADD
    assert isinstance(expression.left, Literal)
    assert isinstance(expression.right, Binary)
    assert expression.right.operator == Operator.MULTIPLY
    assert render_expression(expression) == "1 + 2 * 3"


def test_grouping_overrides_precedence() -> None:
    statement = set_expression("*set x (1 + 2) * 3\n")

    expression = statement.expression
    assert isinstance(expression, Binary)
    assert expression.operator == Operator.MULTIPLY
    assert isinstance(expression.left, Grouping)
    assert render_expression(expression) == "(1 + 2) * 3"


def test_binary_operators_are_left_associative() -> None:
    statement = set_expression("*set x 10 / 4 / 2\n")

    expression = statement.expression
    assert isinstance(expression, Binary)
    assert isinstance(expression.left, Binary)
    assert isinstance(expression.right, Literal)
    assert expression.right.value == 2


def test_logical_operators_bind_loosest() -> None:
    statement = single("*if a = 1 and b > 2\n  Both.\n")

    assert isinstance(statement, If)
    condition = statement.condition
    assert isinstance(condition, Binary)
    assert condition.operator == Operator.AND
    assert isinstance(condition.left, Binary) and condition.left.operator == Operator.EQUALS
    assert isinstance(condition.right, Binary) and condition.right.operator == Operator.GREATER


def test_comparison_binds_tighter_than_equality() -> None:
    statement = single("*if a < b = c\n  Odd.\n")

    assert isinstance(statement, If)
    condition = statement.condition
    assert isinstance(condition, Binary)
    assert condition.operator == Operator.EQUALS
    assert isinstance(condition.left, Binary) and condition.left.operator == Operator.LESS


def test_not_renders_as_function_call_over_grouping() -> None:
    statement = single("*if not (met)\n  Stranger.\n")

    assert isinstance(statement, If)
    condition = statement.condition
    assert isinstance(condition, Unary) and condition.operator == Operator.NOT
    assert isinstance(condition.operand, Grouping)
    assert condition.operand.inner == Identifier("met", condition.operand.inner.position)
    assert condition_text(statement.condition) == "not(met)"


def test_condition_text_strips_outer_grouping() -> None:
    statement = single("*if ((gold > 5))\n  Rich.\n")

    assert isinstance(statement, If)
    assert condition_text(statement.condition) == "gold > 5"
    assert render_expression(statement.condition) == "((gold > 5))"


def test_string_and_boolean_literals_render_back() -> None:
    statement = single('*if name = "Ada" or brave = TRUE\n  Hello.\n')

    assert isinstance(statement, If)
    assert condition_text(statement.condition) == 'name = "Ada" or brave = true'


@pytest.mark.parametrize(
    ("source", "operation", "rendered"),
    [
        ("*set gold 5\n", AssignmentOperation.SET, "5"),
        ("*set gold +5\n", AssignmentOperation.ADD, "5"),
        ("*set gold -5\n", AssignmentOperation.SUBTRACT, "5"),
        ("*set gold %+5\n", AssignmentOperation.FAIRMATH_ADD, "5"),
        ("*set gold %-5\n", AssignmentOperation.FAIRMATH_SUBTRACT, "5"),
        ("*set gold *2\n", AssignmentOperation.SET, "gold * 2"),
        ("*set name & \" the Bold\"\n", AssignmentOperation.SET, 'name & " the Bold"'),
        ("*set gold other + 1\n", AssignmentOperation.SET, "other + 1"),
    ],
    ids=["plain", "add", "subtract", "fairmath_add", "fairmath_subtract", "multiply", "concat", "expression"],
)
def test_set_operation_classification(source: str, operation: AssignmentOperation, rendered: str) -> None:
    statement = set_expression(source)

    assert statement.operation == operation
    assert statement.expression is not None
    assert render_expression(statement.expression) == rendered


def test_set_without_value_keeps_name() -> None:
    statement = set_expression("*set gold\n")

    assert statement.name == "gold"
    assert statement.expression is None


# -------------------------
# Statements
# -------------------------


def test_declarations() -> None:
    statements = parse('*create name "Ada"\n*create score\n*temp\n*temp debt -5\n').statements

    assert all(isinstance(statement, DeclareVariable) for statement in statements)
    name, score, nameless, debt = statements
    assert isinstance(name, DeclareVariable) and name.scope == VariableScope.GLOBAL
    assert isinstance(name.initializer, Literal) and name.initializer.value == "Ada"
    assert isinstance(score, DeclareVariable) and score.initializer is None
    assert isinstance(nameless, DeclareVariable) and nameless.name == ""
    assert isinstance(debt, DeclareVariable) and debt.scope == VariableScope.TEMPORARY
    assert isinstance(debt.initializer, Unary) and debt.initializer.operator == Operator.SUBTRACT


def test_scene_jumps() -> None:
    statements = parse("*goto_scene chapter_two\n*goto_scene chapter_two middle\n*gosub_scene shop browse 3\n").statements

    assert isinstance(statements[0], GotoScene)
    assert (statements[0].scene, statements[0].label) == ("chapter_two", None)
    assert isinstance(statements[1], GotoScene)
    assert (statements[1].scene, statements[1].label) == ("chapter_two", "middle")
    assert isinstance(statements[2], GoSubScene)
    assert (statements[2].scene, statements[2].label) == ("shop", "browse")


def test_goto_label() -> None:
    statement = single("*goto camp\n")

    assert isinstance(statement, GotoLabel)
    assert statement.label == "camp"


def test_input_text_and_unknown_command() -> None:
    statements = parse("*input_text hero_name\n*sound thunder.mp3\n").statements

    assert isinstance(statements[0], InputText) and statements[0].name == "hero_name"
    assert isinstance(statements[1], UnknownCommand)
    assert (statements[1].name, statements[1].text) == ("sound", "thunder.mp3")


def test_scene_list_drops_purchase_marker() -> None:
    statement = single("*scene_list\n  startup\n  $chapter_one\n")

    assert isinstance(statement, SceneList)
    assert statement.scenes == ("startup", "chapter_one")


# -------------------------
# Blocks
# -------------------------


def test_choice_options_and_prefixes() -> None:
    choice = single(RICH_CHOICE_SCENE)

    assert isinstance(choice, Choice)
    assert choice.is_fake is False
    ask, buy, greet, nested, comment = choice.body

    assert isinstance(ask, ChoiceOption)
    assert ask.text == "Ask about the map."
    assert ask.reuse == ReusePolicy.HIDE
    assert [type(statement) for statement in ask.body] == [Prose]

    assert isinstance(buy, ChoiceOption)
    assert buy.selectable_if is not None
    assert condition_text(buy.selectable_if) == "gold > 5"
    assert buy.condition is None

    assert isinstance(greet, ChoiceOption)
    assert greet.condition is not None
    assert condition_text(greet.condition) == "met_merchant"

    assert isinstance(nested, If)
    (tip,) = nested.body
    assert isinstance(tip, ChoiceOption)
    assert tip.text == "Leave a tip."

    assert isinstance(comment, Comment)
    assert comment.text == "merchants remember generosity"


def test_fake_choice_options_need_no_body() -> None:
    parsed = parse("*fake_choice\n  #Smile.\n  #Frown.\nThe guard nods.\n")

    choice, prose = parsed.statements
    assert isinstance(choice, Choice) and choice.is_fake
    assert all(isinstance(option, ChoiceOption) and option.body == () for option in choice.body)
    assert isinstance(prose, Prose)
    assert parsed.diagnostics == ()


def test_choice_option_without_body_warns() -> None:
    parsed = parse("*choice\n  #Wait.\n  #Leave.\n    Gone.\n")

    assert [d.code for d in parsed.diagnostics] == ["PARSER_INDENTATION"]
    assert parsed.diagnostics[0].severity == "warning"


def test_prose_inside_choice_is_a_syntax_error() -> None:
    with pytest.raises(ScriptSyntaxError, match="Expected a #option inside \\*choice"):
        parse("*choice\n  Not an option.\n")


def test_if_elseif_else_endif() -> None:
    statement = single(
        _dedent(
            """
            *if strength > 50
              You lift the gate.
            *elseif cunning > 50
              You pick the lock.
            *elsif luck
              The gate is open.
            *else
              You turn back.
            *endif
            """
        )
    )

    assert isinstance(statement, If)
    assert len(statement.elseifs) == 2
    assert statement.else_branch is not None
    assert statement.has_endif is True
    assert statement.branch_count == 4
    assert condition_text(statement.elseifs[1].condition) == "luck"


def test_if_body_ends_at_dedent() -> None:
    statements = parse("*if brave\n  You charge.\n  *set glory +1\nThe battle ends.\n").statements

    conditional, prose = statements
    assert isinstance(conditional, If)
    assert [type(statement) for statement in conditional.body] == [Prose, SetVariable]
    assert conditional.else_branch is None
    assert isinstance(prose, Prose) and prose.text == "The battle ends."


def test_empty_if_body_warns() -> None:
    parsed = parse("*if ready\n*finish\n")
    conditional, finish = parsed.statements

    assert isinstance(conditional, If) and conditional.body == ()
    assert isinstance(finish, Finish)
    assert [d.code for d in parsed.diagnostics] == ["PARSER_INDENTATION"]


def test_empty_block_warning_can_be_disabled() -> None:
    stream = scan_scene(Scene("startup", "*if ready\n*finish\n"))
    parsed = parse_scene(stream, ParserOptions(warn_on_empty_blocks=False))

    assert parsed.diagnostics == ()


def test_nested_if_inside_if() -> None:
    statement = single("*if a\n  *if b\n    Both.\n  *else\n    Only a.\n*else\n  Neither.\n")

    assert isinstance(statement, If)
    (inner,) = statement.body
    assert isinstance(inner, If)
    assert inner.else_branch is not None
    assert statement.else_branch is not None
    assert isinstance(statement.else_branch.body[0], Prose)


def test_scope_predicates_compare_indent_with_the_opener() -> None:
    parser = Parser(scan_scene(Scene("startup", "*if a\n  Inside.\n*else\n  Other.\n")))
    opener = parser.advance()
    parser.advance()

    assert parser.peek().text == "Inside."
    assert parser.child_scope(opener.indent) and parser.sibling_scope(opener.indent)
    assert not parser.same_scope(opener.indent)

    parser.advance()
    assert not parser.child_scope(opener.indent)
    assert parser.sibling_scope(opener.indent) and parser.same_scope(opener.indent)
    assert parser.match(TokenKind.IF, TokenKind.ENDIF) is False
    assert parser.match(TokenKind.ELSE) is True

    parser.advance()
    assert parser.is_at_end
    assert not (parser.child_scope(0.0) or parser.sibling_scope(0.0) or parser.same_scope(0.0))


@pytest.mark.parametrize(
    "source",
    ["*else\n  Orphan.\n", "*elseif a\n  Orphan.\n", "*endif\n", "*if a\n  A\n  *else\n  B\n"],
    ids=["stray_else", "stray_elseif", "stray_endif", "else_indented_inside_body"],
)
@pytest.mark.parametrize("mode", [ParseMode.STRICT, ParseMode.PERMISSIVE], ids=["strict", "permissive"])
def test_unbalanced_conditionals_are_structural_errors(source: str, mode: ParseMode) -> None:
    with pytest.raises(StructuralError, match="without a matching \\*if"):
        parse(source, mode=mode)


def test_syntax_error_reports_position() -> None:
    with pytest.raises(ScriptSyntaxError, match="Expected a label name after \\*goto; found SCENE_END at startup:1:0:0"):
        parse("*goto\n")


def test_trailing_argument_is_a_syntax_error() -> None:
    with pytest.raises(ScriptSyntaxError, match="Unexpected trailing argument after \\*goto"):
        parse("*goto camp now\n")


def test_permissive_mode_resumes_at_next_jump() -> None:
    parsed = parse("*goto\nLost text.\n*goto end\n*label end\n*finish\n", mode=ParseMode.PERMISSIVE)

    assert [type(statement) for statement in parsed.statements] == [GotoLabel, Label, Finish]
    errors = [d for d in parsed.diagnostics if d.severity == "error"]
    assert [d.code for d in errors] == ["PARSER_UNEXPECTED_TOKEN"]
    assert errors[0].position is not None
    assert errors[0].position.line == 0


def test_lexer_diagnostics_are_kept() -> None:
    parsed = parse("*if ready;\n  Odd.\n")

    assert [d.code for d in parsed.diagnostics] == ["LEXER_UNEXPECTED_CHARACTER"]

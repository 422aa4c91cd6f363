"""Flow graph builder with deferred reference resolution and lazy scene discovery."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Final, Literal as TypingLiteral, TypeAlias

from choicegraph.ast import (
    Achievement,
    Author,
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
    If,
    InputText,
    Label,
    Literal,
    PageBreak,
    Prose,
    Return,
    SceneList,
    SetVariable,
    Statement,
    StatChart,
    Title,
    Unary,
    UnknownCommand,
    VariableScope,
    condition_text,
    render_expression,
)
from choicegraph.diagnostics import (
    BUILDER_DUPLICATE_LABEL,
    BUILDER_INVALID_ACHIEVEMENT,
    BUILDER_INVALID_DECLARATION,
    BUILDER_SCENE_NOT_FOUND,
    BUILDER_UNRESOLVED_REFERENCE,
    BUILDER_UNSUPPORTED_COMMAND,
    Diagnostic,
)
from choicegraph.errors import SceneLoadError, StructuralError
from choicegraph.graph import model
from choicegraph.graph.model import (
    DataType,
    Graph,
    Node,
    NodeKind,
    StatChange,
    StatChartEntry,
    Variable,
)
from choicegraph.graph.options import BuilderOptions
from choicegraph.graph.scenes import AsyncSceneProvider, SceneProvider
from choicegraph.lexer import Operator, Scene, scan_scene
from choicegraph.parser import parse_scene
from choicegraph.text import SourcePosition

logger = logging.getLogger(__name__)

ACHIEVEMENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(\w+)\s+(visible|hidden)\s+(\d+)\s+(.+)$")
STAT_CHART_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(text|percent|opposed_pair)\s+(\w+)(?:\s+(.+))?$")

JumpKind: TypeAlias = TypingLiteral["goto", "gosub"]
LiteralValue: TypeAlias = str | int | float | bool | None


@dataclass(slots=True)
class ConditionalFrame:
    """One open `*if` cascade."""

    node_before_if: str | None
    conditions: list[str] = field(default_factory=list)
    branch_ends: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SubroutineFrame:
    """Return address pushed by `*gosub`/`*gosub_scene`."""

    call_node: str
    target_scene: str
    target_label: str | None


@dataclass(frozen=True, slots=True)
class PendingJump:
    node_id: str
    kind: JumpKind
    scene: str
    label: str | None
    position: SourcePosition


@dataclass(slots=True)
class TraversalState:
    """Per-scene cursor state. Only the subroutine stack outlives a scene."""

    scene: str
    current_node: str | None = None
    last_node: str | None = None
    current_label: str | None = None
    prose: list[Prose] = field(default_factory=list)
    choice_node_stack: list[str] = field(default_factory=list)
    conditional_stack: list[ConditionalFrame] = field(default_factory=list)


class FlowGraphBuilder:
    """Walks parsed scenes into one `Graph`.

    Jump targets are resolved only after scene discovery reaches its fixed
    point, so forward references and references into scenes loaded later
    resolve the same way. The builder is the sole mutator of its graph and is
    not safe for concurrent use.
    """

    def __init__(self, provider: SceneProvider | None = None, options: BuilderOptions | None = None) -> None:
        self._provider = provider
        self._options = options or BuilderOptions()
        self._graph = Graph()
        self._diagnostics: list[Diagnostic] = []
        self._processed: set[str] = set()
        self._missing: set[str] = set()
        self._pending_jumps: list[PendingJump] = []
        self._subroutine_stack: list[SubroutineFrame] = []
        self._temporaries: dict[str, dict[str, Variable]] = {}
        self._state = TraversalState(scene="")
        self._finished = False

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def options(self) -> BuilderOptions:
        return self._options

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def processed_scenes(self) -> frozenset[str]:
        return frozenset(self._processed)

    @property
    def missing_scenes(self) -> frozenset[str]:
        return frozenset(self._missing)

    @property
    def subroutine_stack(self) -> list[SubroutineFrame]:
        return self._subroutine_stack

    def temporaries(self, scene: str) -> dict[str, Variable]:
        return dict(self._temporaries.get(scene, {}))

    # -------------------------
    # Scene discovery
    # -------------------------

    def build(self, entry_scene: str = "startup") -> Graph:
        provider = self._require_provider()
        if not provider.has_scene(entry_scene):
            raise SceneLoadError(f"Entry scene {entry_scene!r} does not exist")
        self.process_scene(entry_scene)

        if self._options.process_linked_scenes:
            while names := self.pending_scenes():
                for name in names:
                    self.process_scene(name)

        return self.finish()

    async def build_async(self, provider: AsyncSceneProvider, entry_scene: str = "startup") -> Graph:
        """Like `build`, but fetches each discovery round's scenes concurrently.

        Fetched scenes are linked one at a time in the deterministic discovery order.
        """
        if not await provider.has_scene(entry_scene):
            raise SceneLoadError(f"Entry scene {entry_scene!r} does not exist")
        self.link_scene(entry_scene, await provider.load_scene(entry_scene))

        if self._options.process_linked_scenes:
            while names := self.pending_scenes():
                texts = await asyncio.gather(*(_fetch_scene(provider, name) for name in names))
                for name, text in zip(names, texts, strict=True):
                    if text is None:
                        self._mark_missing(name)
                    else:
                        self.link_scene(name, text)

        return self.finish()

    def pending_scenes(self) -> list[str]:
        """Referenced scenes not yet processed: `*scene_list` order first, then jump order."""
        referenced = [
            *self._graph.metadata.scene_list,
            *(jump.scene for jump in self._pending_jumps),
        ]
        pending: list[str] = []
        for name in referenced:
            if name in self._processed or name in self._missing or name in pending:
                continue
            pending.append(name)
        return pending

    def process_scene(self, name: str) -> bool:
        """Load and link one scene; returns `False` if it was already processed or is missing."""
        if name in self._processed or name in self._missing:
            return False
        provider = self._require_provider()
        if not provider.has_scene(name):
            self._mark_missing(name)
            return False
        return self.link_scene(name, provider.load_scene(name))

    def link_scene(self, name: str, text: str) -> bool:
        """Scan, parse and link the source of one scene; a no-op for processed scenes."""
        if name in self._processed:
            return False
        if self._finished:
            raise RuntimeError("Cannot link scenes after the graph has been finished")

        parsed = parse_scene(scan_scene(Scene(name, text)), self._options.parser)
        self._diagnostics.extend(parsed.diagnostics)
        self._processed.add(name)

        nodes_before = len(self._graph)
        entry = self._graph.add_node(
            NodeKind.SCENE_ENTRY,
            name,
            {"scene": name},
            SourcePosition.scene_start(name),
        )
        self._graph.set_entry_point(name, entry.id)
        self._state = TraversalState(scene=name, current_node=entry.id, last_node=entry.id)

        self._walk(parsed.statements)
        self._flush_prose()

        logger.debug("Linked scene %s: %d nodes", name, len(self._graph) - nodes_before)
        return True

    def finish(self) -> Graph:
        """Resolve every recorded jump and return the graph. Idempotent."""
        if not self._finished:
            self._finished = True
            self._resolve_jumps()
            logger.info(
                "Built graph from %d scenes: %d nodes, %d edges, %d diagnostics",
                len(self._processed),
                len(self._graph),
                len(self._graph.edges),
                len(self._diagnostics),
            )
        return self._graph

    def _require_provider(self) -> SceneProvider:
        if self._provider is None:
            raise ValueError("FlowGraphBuilder needs a scene provider to load scenes")
        return self._provider

    def _mark_missing(self, name: str) -> None:
        self._missing.add(name)
        self._diagnostics.append(BUILDER_SCENE_NOT_FOUND.at(None, f"Scene: {name!r}."))
        logger.debug("Scene %s not found", name)

    def _resolve_jumps(self) -> None:
        for jump in self._pending_jumps:
            if jump.label is None:
                target = self._graph.entry_points.get(jump.scene)
                description = f"scene {jump.scene!r}"
            else:
                target = self._graph.resolve_label(jump.scene, jump.label)
                description = f"label {Graph.label_key(jump.scene, jump.label)!r}"

            if target is None:
                self._graph.update_attributes(jump.node_id, dangling=True)
                self._diagnostics.append(BUILDER_UNRESOLVED_REFERENCE.at(jump.position, f"Target: {description}."))
                continue
            self._graph.add_edge(jump.node_id, target, attributes={"jump": jump.kind}, position=jump.position)

    # -------------------------
    # Statement walk
    # -------------------------

    def _walk(self, statements: tuple[Statement, ...]) -> None:
        for statement in statements:
            self._statement(statement)

    def _statement(self, statement: Statement) -> None:
        if isinstance(statement, Prose):
            self._state.prose.append(statement)
            return

        self._flush_prose()
        match statement:
            case Choice():
                self._choice(statement)
            case If():
                self._conditional(statement)
            case Label():
                self._label(statement)
            case GotoLabel(label=label, position=position):
                self._jump(NodeKind.GOTO, f"*goto {label}", self._state.scene, label, position)
            case GotoScene(scene=scene, label=label, position=position):
                text = f"*goto_scene {scene}" if label is None else f"*goto_scene {scene} {label}"
                self._jump(NodeKind.GOTO, text, scene, label, position)
            case GoSub(label=label, position=position):
                self._jump(NodeKind.GOSUB, f"*gosub {label}", self._state.scene, label, position)
            case GoSubScene(scene=scene, label=label, position=position):
                text = f"*gosub_scene {scene}" if label is None else f"*gosub_scene {scene} {label}"
                self._jump(NodeKind.GOSUB, text, scene, label, position)
            case Return():
                self._return(statement)
            case DeclareVariable():
                self._declare(statement)
            case SetVariable():
                self._set(statement)
            case InputText(name=name, position=position):
                if not name:
                    self._diagnostics.append(BUILDER_INVALID_DECLARATION.at(position, "*input_text needs a variable."))
                node = self._add(
                    NodeKind.SET,
                    f"*input_text {name}".rstrip(),
                    {"name": name, "operation": "set", "value": None, "is_fairmath": False, "source": "input_text"},
                    position,
                )
                self._link(node)
            case Finish(text=text, position=position):
                self._link(self._add(NodeKind.FINISH, text or "*finish", {}, position))
                self._cut()
            case PageBreak(text=text, position=position):
                self._link(self._add(NodeKind.PAGE_BREAK, text or "*page_break", {}, position))
            case Comment(text=text, position=position):
                self._link(self._add(NodeKind.COMMENT, text, {}, position))
            case Title(text=text, position=position):
                self._graph.metadata.title = text
                self._link(self._add(NodeKind.METADATA, f"Title: {text}", {"type": "title", "value": text}, position))
            case Author(text=text, position=position):
                self._graph.metadata.author = text
                self._link(self._add(NodeKind.METADATA, f"Author: {text}", {"type": "author", "value": text}, position))
            case SceneList():
                self._scene_list(statement)
            case Achievement():
                self._achievement(statement)
            case StatChart():
                self._stat_chart(statement)
            case UnknownCommand(name=name, text=text, position=position):
                self._diagnostics.append(BUILDER_UNSUPPORTED_COMMAND.at(position, f"Command: *{name}."))
                node = self._add(NodeKind.UNKNOWN_COMMAND, f"*{name} {text}".rstrip(), {"command": name}, position)
                self._link(node)
            case _:
                raise TypeError(f"Unexpected {type(statement).__name__} outside of its parent block")

    # -------------------------
    # Cursor primitives
    # -------------------------

    def _add(
        self,
        kind: NodeKind,
        text: str,
        attributes: model.Attributes,
        position: SourcePosition | None,
    ) -> Node:
        return self._graph.add_node(kind, text, attributes, position)

    def _link(
        self,
        node: Node,
        *,
        condition: str | None = None,
        stat_changes: tuple[StatChange, ...] = (),
    ) -> None:
        """Edge the cursor into `node` (if flow reaches here) and move the cursor onto it."""
        state = self._state
        if state.current_node is not None:
            self._graph.add_edge(
                state.current_node,
                node.id,
                condition=condition,
                stat_changes=stat_changes,
                position=node.position,
            )
        state.current_node = node.id
        state.last_node = node.id

    def _cut(self) -> None:
        """Flow does not fall through past a jump, `*return` or `*finish`."""
        self._state.current_node = None

    def _flush_prose(self) -> None:
        state = self._state
        if not state.prose:
            return
        prose = state.prose
        state.prose = []
        text = "\n".join(item.text for item in prose)
        self._link(self._add(NodeKind.TEXT, text, {}, prose[0].position))

    # -------------------------
    # Choices
    # -------------------------

    def _choice(self, statement: Choice) -> None:
        state = self._state
        text = "*fake_choice" if statement.is_fake else "*choice"
        choice = self._add(NodeKind.CHOICE, text, {"is_fake": statement.is_fake}, statement.position)
        self._link(choice)

        state.choice_node_stack.append(choice.id)
        ends = self._choice_body(statement.body, None)
        state.choice_node_stack.pop()

        if not ends:
            self._cut()
            return
        merge = self._add(NodeKind.MERGE, "end of choice", {"joins": "choice"}, statement.position)
        self._join(ends, merge)

    def _choice_body(self, body: tuple[Statement, ...], guard: str | None) -> list[str]:
        """Link the options of a choice block; returns the nodes whose flow falls through it."""
        ends: list[str] = []
        for item in body:
            match item:
                case ChoiceOption():
                    end = self._option(item, guard)
                    if end is not None:
                        ends.append(end)
                case If():
                    for branch_guard, branch_body in _cascade_conditions(item):
                        ends.extend(self._choice_body(branch_body, _conjoin(guard, branch_guard)))
                case Comment():
                    continue
                case _:
                    raise TypeError(f"Unexpected {type(item).__name__} inside a choice block")
        return ends

    def _option(self, option: ChoiceOption, guard: str | None) -> str | None:
        state = self._state
        choice_id = state.choice_node_stack[-1]
        display = condition_text(option.condition) if option.condition is not None else None
        selectable = condition_text(option.selectable_if) if option.selectable_if is not None else None
        condition = _conjoin(_conjoin(guard, display), selectable)
        reuse = option.reuse.value if option.reuse is not None else None

        node = self._add(
            NodeKind.OPTION,
            option.text,
            {"reuse": reuse, "condition": display, "selectable_if": selectable},
            option.position,
        )
        self._graph.add_edge(
            choice_id,
            node.id,
            condition=condition,
            attributes={"reuse": reuse, "is_selectable": selectable is not None},
            position=option.position,
        )

        state.current_node = node.id
        state.last_node = node.id
        self._walk(option.body)
        self._flush_prose()
        return state.current_node

    # -------------------------
    # Conditionals
    # -------------------------

    def _conditional(self, statement: If) -> None:
        state = self._state
        frame = ConditionalFrame(node_before_if=state.current_node)
        state.conditional_stack.append(frame)

        branches: list[tuple[str, Expression | None, tuple[Statement, ...], SourcePosition]] = [
            ("if", statement.condition, statement.body, statement.position),
            *(("elseif", branch.condition, branch.body, branch.position) for branch in statement.elseifs),
        ]
        if statement.else_branch is not None:
            else_branch = statement.else_branch
            branches.append(("else", None, else_branch.body, else_branch.position))

        for branch, expression, body, position in branches:
            self._conditional_branch(branch, expression, body, position)

        state.conditional_stack.pop()
        merge = self._add(NodeKind.MERGE, "*endif", {"joins": "if", "branches": len(frame.branch_ends)}, statement.position)
        self._join(frame.branch_ends, merge)

    def _conditional_branch(
        self,
        branch: str,
        expression: Expression | None,
        body: tuple[Statement, ...],
        position: SourcePosition,
    ) -> None:
        state = self._state
        frame = state.conditional_stack[-1]
        edge_condition = _branch_condition(frame.conditions, expression)
        if expression is not None:
            frame.conditions.append(condition_text(expression))

        node = self._add(
            NodeKind.CONDITIONAL,
            f"*{branch} {edge_condition}",
            {"branch": branch, "condition": edge_condition, "depth": len(state.conditional_stack)},
            position,
        )
        if frame.node_before_if is not None:
            self._graph.add_edge(frame.node_before_if, node.id, condition=edge_condition, position=position)
        state.current_node = node.id
        state.last_node = node.id

        self._walk(body)
        self._flush_prose()
        # A branch that jumped away still records its last node.
        frame.branch_ends.append(state.current_node or state.last_node or node.id)

    def _join(self, ends: list[str], merge: Node) -> None:
        """Edge every branch end into `merge`, positioned at the branch's last node, and continue from it."""
        for end in ends:
            position = self._graph.node(end).position or merge.position
            self._graph.add_edge(end, merge.id, attributes={"join": True}, position=position)
        self._state.current_node = merge.id
        self._state.last_node = merge.id

    # -------------------------
    # Labels, jumps and subroutines
    # -------------------------

    def _label(self, statement: Label) -> None:
        state = self._state
        node = self._add(NodeKind.LABEL, statement.name, {"label": statement.name}, statement.position)
        self._link(node)
        if not self._graph.set_label(state.scene, statement.name, node.id):
            self._diagnostics.append(BUILDER_DUPLICATE_LABEL.at(statement.position, f"Label: {statement.name!r}."))
        state.current_label = statement.name

    def _jump(self, kind: NodeKind, text: str, scene: str, label: str | None, position: SourcePosition) -> None:
        node = self._add(kind, text, {"scene": scene, "label": label}, position)
        self._link(node)
        jump_kind: JumpKind = "gosub" if kind == NodeKind.GOSUB else "goto"
        self._pending_jumps.append(PendingJump(node.id, jump_kind, scene, label, position))

        if kind == NodeKind.GOSUB:
            # Flow resumes after the call once the subroutine returns.
            self._subroutine_stack.append(SubroutineFrame(node.id, scene, label))
        else:
            self._cut()

    def _return(self, statement: Return) -> None:
        state = self._state
        if not self._subroutine_stack:
            raise StructuralError("*return without a matching *gosub", statement.position)

        node = self._add(NodeKind.RETURN, "*return", {}, statement.position)
        self._link(node)

        frames = [
            frame
            for frame in self._subroutine_stack
            if frame.target_scene == state.scene and frame.target_label == state.current_label
        ]
        if not frames:
            frames = [self._subroutine_stack[-1]]
        for frame in frames:
            self._subroutine_stack.remove(frame)
            self._graph.add_edge(node.id, frame.call_node, attributes={"return": True}, position=statement.position)
        self._cut()

    # -------------------------
    # Variables
    # -------------------------

    def _declare(self, statement: DeclareVariable) -> None:
        state = self._state
        name = statement.name
        if not name:
            self._diagnostics.append(BUILDER_INVALID_DECLARATION.at(statement.position, "Missing variable name."))
        elif statement.initializer is None and statement.scope == VariableScope.GLOBAL:
            self._diagnostics.append(BUILDER_INVALID_DECLARATION.at(statement.position, f"Missing value for {name!r}."))

        data_type = infer_data_type(statement.initializer)
        initial_value = expression_value(statement.initializer)
        node = self._add(
            NodeKind.VARIABLE,
            f"*{statement.scope} {name}".rstrip(),
            {
                "name": name,
                "scope": statement.scope.value,
                "data_type": data_type.value,
                "initial_value": initial_value,
            },
            statement.position,
        )
        self._link(node)

        if not name:
            return
        variable = Variable(name, statement.scope, data_type, initial_value)
        if statement.scope == VariableScope.GLOBAL:
            self._graph.metadata.variables[name] = variable
        else:
            self._temporaries.setdefault(state.scene, {})[name] = variable

    def _set(self, statement: SetVariable) -> None:
        name = statement.name
        if not name:
            self._diagnostics.append(BUILDER_INVALID_DECLARATION.at(statement.position, "Missing variable name."))
        elif statement.expression is None:
            self._diagnostics.append(BUILDER_INVALID_DECLARATION.at(statement.position, f"Missing value for {name!r}."))

        value = expression_value(statement.expression)
        operation = statement.operation
        node = self._add(
            NodeKind.SET,
            f"*set {name}".rstrip(),
            {
                "name": name,
                "operation": operation.value,
                "value": value,
                "is_fairmath": operation.is_fairmath,
            },
            statement.position,
        )
        self._link(node, stat_changes=(StatChange(name, operation, value),))

    # -------------------------
    # Metadata
    # -------------------------

    def _scene_list(self, statement: SceneList) -> None:
        metadata = self._graph.metadata
        for name in statement.scenes:
            if name not in metadata.scene_list:
                metadata.scene_list.append(name)
        node = self._add(
            NodeKind.METADATA,
            "Scene List",
            {"type": "scene_list", "scenes": list(statement.scenes)},
            statement.position,
        )
        self._link(node)

    def _achievement(self, statement: Achievement) -> None:
        match = ACHIEVEMENT_PATTERN.match(statement.header)
        if match is None:
            self._diagnostics.append(BUILDER_INVALID_ACHIEVEMENT.at(statement.position, f"Found {statement.header!r}."))
            return

        achievement_id, visibility, points, name = match.groups()
        lines = statement.lines
        achievement = model.Achievement(
            id=achievement_id,
            name=name,
            visibility=visibility,
            points=int(points),
            description=lines[0] if lines else "",
            earned_description=lines[1] if len(lines) > 1 else "",
        )
        self._graph.metadata.achievements.append(achievement)
        node = self._add(
            NodeKind.METADATA,
            f"Achievement: {name}",
            {
                "type": "achievement",
                "id": achievement_id,
                "name": name,
                "visibility": visibility,
                "points": int(points),
            },
            statement.position,
        )
        self._link(node)

    def _stat_chart(self, statement: StatChart) -> None:
        entries: list[StatChartEntry] = []
        for line in statement.lines:
            match = STAT_CHART_PATTERN.match(line)
            if match is None:
                # Label lines of `opposed_pair` rows.
                continue
            display, variable, label = match.groups()
            entries.append(StatChartEntry(display, variable, label or variable))

        self._graph.metadata.stat_charts.append(tuple(entries))
        node = self._add(
            NodeKind.METADATA,
            "Stat Chart",
            {
                "type": "stat_chart",
                "stats": [{"display": e.display, "variable": e.variable, "label": e.label} for e in entries],
            },
            statement.position,
        )
        self._link(node)


# -------------------------
# Helpers
# -------------------------


async def _fetch_scene(provider: AsyncSceneProvider, name: str) -> str | None:
    if not await provider.has_scene(name):
        return None
    return await provider.load_scene(name)


def _conjoin(left: str | None, right: str | None) -> str | None:
    if left is None:
        return right
    if right is None:
        return left
    return f"({left}) and ({right})"


def _prior_disjunction(conditions: list[str]) -> str:
    if len(conditions) == 1:
        return conditions[0]
    return " or ".join(f"({condition})" for condition in conditions)


def _branch_condition(prior: list[str], expression: Expression | None) -> str:
    """Edge condition of one cascade branch given the conditions of the branches before it."""
    if expression is None:
        return f"not({_prior_disjunction(prior)})"
    current = condition_text(expression)
    if not prior:
        return current
    return f"not({_prior_disjunction(prior)}) and ({current})"


def _cascade_conditions(statement: If) -> list[tuple[str, tuple[Statement, ...]]]:
    prior: list[str] = []
    branches: list[tuple[str, tuple[Statement, ...]]] = []
    cascade: list[ElseIf | If] = [statement, *statement.elseifs]
    for branch in cascade:
        branches.append((_branch_condition(prior, branch.condition), branch.body))
        prior.append(condition_text(branch.condition))
    if statement.else_branch is not None:
        else_branch: Else = statement.else_branch
        branches.append((_branch_condition(prior, None), else_branch.body))
    return branches


def infer_data_type(expression: Expression | None) -> DataType:
    """`true`/`false` are boolean, numbers and missing values numeric, anything else a string."""
    value = expression_value(expression)
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if value is None or isinstance(value, (int, float)):
        return DataType.NUMERIC
    return DataType.STRING


def expression_value(expression: Expression | None) -> LiteralValue:
    """Python value of a literal (or negated number); rendered source text otherwise."""
    if expression is None:
        return None
    if isinstance(expression, Literal):
        return expression.value
    if (
        isinstance(expression, Unary)
        and expression.operator in (Operator.SUBTRACT, Operator.ADD)
        and isinstance(expression.operand, Literal)
        and isinstance(expression.operand.value, (int, float))
        and not isinstance(expression.operand.value, bool)
    ):
        value = expression.operand.value
        return -value if expression.operator == Operator.SUBTRACT else value
    return render_expression(expression)

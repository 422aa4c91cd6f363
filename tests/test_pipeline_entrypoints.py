import asyncio

import pytest

from choicegraph.graph import BuilderOptions, InMemorySceneProvider, NodeKind
from choicegraph.lexer import TokenKind
from choicegraph.parser import ParseMode, ParserOptions
from choicegraph.pipeline import build_graph, build_graph_async, run_check, run_parse, run_scan
from tests._shared_cases import CHOICE_SCENE


class _AsyncProvider:
    def __init__(self, scenes: dict[str, str]) -> None:
        self._scenes = scenes

    async def list_scenes(self) -> list[str]:
        return list(self._scenes)

    async def load_scene(self, name: str) -> str:
        return self._scenes[name]

    async def has_scene(self, name: str) -> bool:
        return name in self._scenes


def test_run_scan_names_the_scene() -> None:
    stream = run_scan("*finish\n", "chapter")

    assert stream.scene == "chapter"
    assert stream.kinds() == [TokenKind.SCENE_START, TokenKind.FINISH, TokenKind.SCENE_END]


def test_run_parse_keeps_source_and_options() -> None:
    source = "Hello.\n"

    result = run_parse(source)

    assert result.source_text == source
    assert result.options == ParserOptions()
    assert result.parsed.scene == "startup"
    assert result.diagnostics == []
    assert result.has_errors is False


def test_run_parse_permissive_reports_errors() -> None:
    result = run_parse("*goto\n", mode=ParseMode.PERMISSIVE)

    assert result.has_errors is True
    assert [d.code for d in result.diagnostics] == ["PARSER_UNEXPECTED_TOKEN"]
    assert result.options.recover_from_errors is True


def test_run_parse_rejects_options_and_mode() -> None:
    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        run_parse("Hello.\n", options=ParserOptions(), mode=ParseMode.STRICT)


def test_build_graph_accepts_a_mapping() -> None:
    result = build_graph({"startup": CHOICE_SCENE, "city": "*finish\n"})

    assert result.entry_scene == "startup"
    assert result.options == BuilderOptions()
    assert set(result.graph.entry_points) == {"startup", "city"}
    assert result.has_errors is False


def test_build_graph_with_mode_uses_builder_options_for_mode() -> None:
    result = build_graph(InMemorySceneProvider({"startup": "*goto\n*finish\n"}), mode=ParseMode.PERMISSIVE)

    assert result.options == BuilderOptions.for_mode(ParseMode.PERMISSIVE)
    assert result.has_errors is True
    assert result.graph.nodes_of_kind(NodeKind.SCENE_ENTRY)


def test_build_graph_rejects_options_and_mode() -> None:
    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        build_graph({"startup": "Hello.\n"}, options=BuilderOptions(), mode=ParseMode.STRICT)


def test_build_graph_async_matches_sync() -> None:
    scenes = {"startup": CHOICE_SCENE, "city": "*finish\n"}

    async_result = asyncio.run(build_graph_async(_AsyncProvider(scenes)))
    sync_result = build_graph(scenes)

    assert len(async_result.graph) == len(sync_result.graph)
    assert len(async_result.graph.edges) == len(sync_result.graph.edges)
    assert async_result.diagnostics == sync_result.diagnostics


def test_run_check_builds_and_validates() -> None:
    result = run_check({"startup": "*goto nowhere\n"})

    assert result.has_errors is False
    assert [d.code for d in result.diagnostics] == ["BUILDER_UNRESOLVED_REFERENCE"]
    assert result.report.is_valid is True
    assert result.build.entry_scene == "startup"


def test_run_check_reuses_provided_build() -> None:
    build = build_graph({"startup": "*finish\nOrphan.\n"})

    result = run_check(build=build)

    assert result.build is build
    assert len(result.report.unreachable) == 1
    assert result.report.is_valid is False


def test_run_check_rejects_build_with_provider() -> None:
    build = build_graph({"startup": "Hello.\n"})

    with pytest.raises(ValueError, match="Pass either build or provider/options/mode, not both"):
        run_check({"startup": "Hello.\n"}, build=build)


def test_run_check_needs_a_provider_or_build() -> None:
    with pytest.raises(ValueError, match="scene provider is required"):
        run_check()

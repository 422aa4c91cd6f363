"""Unified entrypoints that orchestrate scan/parse/build/check."""

from __future__ import annotations

from collections.abc import Mapping

from choicegraph.analysis import validate_graph
from choicegraph.diagnostics import has_errors
from choicegraph.graph import (
    AsyncSceneProvider,
    BuilderOptions,
    FlowGraphBuilder,
    InMemorySceneProvider,
    SceneProvider,
)
from choicegraph.lexer import Scene, TokenStream, scan_scene
from choicegraph.parser import ParseMode, ParserOptions, parse_scene, resolve_parser_options
from choicegraph.pipeline.results import CheckRunResult, GraphBuildResult, SceneParseResult


def run_scan(text: str, scene_name: str = "startup") -> TokenStream:
    """Scan one scene's text into tokens; never raises."""
    return scan_scene(Scene(scene_name, text))


def run_parse(
    text: str,
    scene_name: str = "startup",
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> SceneParseResult:
    """Scan and parse one scene's text."""
    resolved_options = resolve_parser_options(options=options, mode=mode)
    parsed = parse_scene(run_scan(text, scene_name), resolved_options)
    return SceneParseResult(source_text=text, parsed=parsed, options=resolved_options)


def build_graph(
    provider: SceneProvider | Mapping[str, str],
    entry_scene: str = "startup",
    options: BuilderOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> GraphBuildResult:
    """Build the flow graph reachable from `entry_scene`.

    A plain mapping of scene name to text is accepted in place of a provider.
    """
    resolved_options = _resolve_builder_options(options, mode)
    builder = FlowGraphBuilder(_as_provider(provider), resolved_options)
    graph = builder.build(entry_scene)
    return GraphBuildResult(
        graph=graph,
        diagnostics=list(builder.diagnostics),
        options=resolved_options,
        entry_scene=entry_scene,
    )


async def build_graph_async(
    provider: AsyncSceneProvider,
    entry_scene: str = "startup",
    options: BuilderOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> GraphBuildResult:
    """Build the flow graph with an async provider; scene fetches of one round run concurrently."""
    resolved_options = _resolve_builder_options(options, mode)
    builder = FlowGraphBuilder(options=resolved_options)
    graph = await builder.build_async(provider, entry_scene)
    return GraphBuildResult(
        graph=graph,
        diagnostics=list(builder.diagnostics),
        options=resolved_options,
        entry_scene=entry_scene,
    )


def run_check(
    provider: SceneProvider | Mapping[str, str] | None = None,
    entry_scene: str = "startup",
    options: BuilderOptions | None = None,
    *,
    mode: ParseMode | None = None,
    build: GraphBuildResult | None = None,
) -> CheckRunResult:
    """Build (or reuse) a graph and run every analysis pass over it."""
    resolved_build = _resolve_build(provider, entry_scene, options=options, mode=mode, build=build)
    report = validate_graph(resolved_build.graph)
    diagnostics = list(resolved_build.diagnostics)
    return CheckRunResult(
        build=resolved_build,
        report=report,
        diagnostics=diagnostics,
        has_errors=has_errors(diagnostics),
    )


def _resolve_builder_options(options: BuilderOptions | None, mode: ParseMode | None) -> BuilderOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")
    if options is not None:
        return options
    if mode is not None:
        return BuilderOptions.for_mode(mode)
    return BuilderOptions()


def _resolve_build(
    provider: SceneProvider | Mapping[str, str] | None,
    entry_scene: str,
    *,
    options: BuilderOptions | None,
    mode: ParseMode | None,
    build: GraphBuildResult | None,
) -> GraphBuildResult:
    if build is not None:
        if options is not None or mode is not None or provider is not None:
            raise ValueError("Pass either build or provider/options/mode, not both")
        return build
    if provider is None:
        raise ValueError("A scene provider is required when no build result is passed")
    return build_graph(provider, entry_scene, options, mode=mode)


def _as_provider(provider: SceneProvider | Mapping[str, str]) -> SceneProvider:
    if isinstance(provider, Mapping):
        return InMemorySceneProvider(provider)
    return provider

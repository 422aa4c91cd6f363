#!/usr/bin/env python3
"""Quick perf benchmark for building flow graphs from a scene directory."""

from __future__ import annotations

import argparse
import cProfile
import io
import logging
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from choicegraph.graph import BuilderOptions, DirectorySceneProvider, FlowGraphBuilder
from choicegraph.lexer import Scene, scan_scene
from choicegraph.parser import ParseMode, ParserOptions, parse_scene


def _scan_and_parse(
    provider: DirectorySceneProvider,
    names: list[str],
    *,
    label: str,
    show_progress: bool,
) -> tuple[int, int]:
    total_statements = 0
    total_diagnostics = 0
    options = ParserOptions.for_mode(ParseMode.PERMISSIVE)
    iterator = tqdm(names, desc=label, unit="scene") if show_progress else names
    for name in iterator:
        parsed = parse_scene(scan_scene(Scene(name, provider.load_scene(name))), options)
        total_statements += len(parsed.statements)
        total_diagnostics += len(parsed.diagnostics)
    return total_statements, total_diagnostics


def _run_once(
    provider: DirectorySceneProvider,
    names: list[str],
    entry_scene: str,
    *,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int, int, int]:
    start = time.perf_counter()
    statements, _ = _scan_and_parse(provider, names, label=label, show_progress=show_progress)
    builder = FlowGraphBuilder(provider, BuilderOptions.for_mode(ParseMode.PERMISSIVE))
    graph = builder.build(entry_scene)
    duration = time.perf_counter() - start
    return duration, statements, len(graph), len(graph.edges), len(builder.diagnostics)


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark scene parsing and graph building throughput")
    parser.add_argument("scene_root", type=Path, help="Directory holding <scene>.txt files")
    parser.add_argument("--entry", type=str, default="startup", help="Entry scene (default: startup)")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log builder progress")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    scene_root: Path = args.scene_root
    if not scene_root.exists() or not scene_root.is_dir():
        raise SystemExit(f"Invalid scene_root: {scene_root}")

    provider = DirectorySceneProvider(scene_root)
    names = provider.list_scenes()
    if not names:
        raise SystemExit(f"No .txt scenes found under {scene_root}")
    if args.entry not in names:
        raise SystemExit(f"Entry scene {args.entry!r} not found under {scene_root}")

    show_progress = not args.no_progress

    def _benchmark() -> tuple[list[float], int, int, int, int]:
        for warmup_idx in range(max(args.warmups, 0)):
            _run_once(
                provider,
                names,
                args.entry,
                label=f"warmup {warmup_idx + 1}/{max(args.warmups, 0)}",
                show_progress=show_progress,
            )

        timings: list[float] = []
        statements = nodes = edges = diagnostics = 0
        for run_idx in range(max(args.runs, 1)):
            duration, statements, nodes, edges, diagnostics = _run_once(
                provider,
                names,
                args.entry,
                label=f"run {run_idx + 1}/{max(args.runs, 1)}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, statements, nodes, edges, diagnostics

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, statements, nodes, edges, diagnostics = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, statements, nodes, edges, diagnostics = _benchmark()

    mean = statistics.mean(timings)

    print(f"Dataset: {scene_root}")
    print(f"Scenes: {len(names)}")
    print(f"Statements: {statements}")
    print(f"Graph: {nodes} nodes, {edges} edges")
    print(f"Diagnostics: {diagnostics}")
    print(f"Runs: {len(timings)} (warmups={max(args.warmups, 0)})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Scenes/s (mean): {len(names) / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

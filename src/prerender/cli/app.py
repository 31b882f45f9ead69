# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point for building and watching prerendered components."""

from __future__ import annotations

import threading
from pathlib import Path

import typer

from ..compiler import InProcessModuleContext
from ..errors import PrerenderError
from ..logging import detect_tty, fail, info, ok, section, warn
from ..pipeline import LocalDevServer, PollingWatcher, PrerenderPlugin
from ._options import (
    DEBUG_OPTION,
    EMOJI_OPTION,
    INTERVAL_OPTION,
    MINIFY_OPTION,
    NO_CACHE_OPTION,
    RENDERER_OPTION,
    ROOT_OPTION,
    PrerenderCLIOptions,
)

app = typer.Typer(
    help="Prerender components into static HTML fragments.",
    no_args_is_help=True,
    add_completion=False,
)


def _resolve_plugin(options: PrerenderCLIOptions, mode: str) -> PrerenderPlugin:
    plugin = PrerenderPlugin(options.overrides(), emoji=options.emoji, debug=options.debug)
    try:
        plugin.config_resolved(options.root.resolve(), mode)
    except PrerenderError as exc:
        fail(str(exc), use_emoji=options.emoji)
        raise typer.Exit(code=2) from exc
    return plugin


@app.command()
def build(
    root: ROOT_OPTION = Path("."),
    renderer: RENDERER_OPTION = None,
    minify: MINIFY_OPTION = None,
    no_cache: NO_CACHE_OPTION = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Run one full prerender pass."""

    options = PrerenderCLIOptions(root, renderer, minify, no_cache, emoji, debug)
    plugin = _resolve_plugin(options, "build")
    try:
        report = plugin.build_start()
    except PrerenderError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=2) from exc
    if report.failed:
        warn(f"Failed components: {', '.join(report.failed)}", use_emoji=emoji)
        raise typer.Exit(code=1)


@app.command()
def watch(
    root: ROOT_OPTION = Path("."),
    renderer: RENDERER_OPTION = None,
    minify: MINIFY_OPTION = None,
    no_cache: NO_CACHE_OPTION = False,
    emoji: EMOJI_OPTION = True,
    debug: DEBUG_OPTION = False,
    interval: INTERVAL_OPTION = 0.5,
) -> None:
    """Prerender once, then re-render components as they change."""

    options = PrerenderCLIOptions(root, renderer, minify, no_cache, emoji, debug)
    plugin = _resolve_plugin(options, "serve")
    orchestrator = plugin.orchestrator
    watcher = PollingWatcher(matches=orchestrator.discovery.matches, interval=interval)
    server = LocalDevServer(
        watcher=watcher,
        module_context=InProcessModuleContext(orchestrator.components_dir),
    )
    try:
        plugin.configure_server(server)
        plugin.build_start()
    except PrerenderError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=2) from exc

    section("Watching for changes (Ctrl+C to stop)", use_color=detect_tty())
    stop = threading.Event()
    try:
        watcher.run(stop, on_tick=plugin.flush)
    except KeyboardInterrupt:
        stop.set()
        info("Stopped watching", use_emoji=emoji)


@app.command("clear-cache")
def clear_cache(
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
) -> None:
    """Delete the persisted content cache."""

    options = PrerenderCLIOptions(root, emoji=emoji)
    plugin = _resolve_plugin(options, "build")
    if plugin.orchestrator.clear_cache():
        ok(f"Removed {plugin.orchestrator.cache.path}", use_emoji=emoji)
    else:
        info("No cache file to remove", use_emoji=emoji)


__all__ = ["app"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared option declarations for the prerender CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import RendererKind

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Project root.", file_okay=False),
]
RENDERER_OPTION = Annotated[
    RendererKind | None,
    typer.Option("--renderer", help="Rendering strategy (structural or full)."),
]
MINIFY_OPTION = Annotated[
    bool | None,
    typer.Option("--minify/--no-minify", help="Minify written fragments."),
]
NO_CACHE_OPTION = Annotated[
    bool,
    typer.Option("--no-cache", help="Ignore and do not update the content cache."),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
DEBUG_OPTION = Annotated[
    bool,
    typer.Option("--debug", help="Print debug diagnostics."),
]
INTERVAL_OPTION = Annotated[
    float,
    typer.Option("--interval", min=0.05, help="Seconds between filesystem polls."),
]


@dataclass(slots=True)
class PrerenderCLIOptions:
    """Capture the options shared by the prerender commands."""

    root: Path
    renderer: RendererKind | None = None
    minify: bool | None = None
    no_cache: bool = False
    emoji: bool = True
    debug: bool = False

    def overrides(self) -> dict[str, Any]:
        """Return configuration overrides for the supplied flags."""

        overrides: dict[str, Any] = {}
        if self.renderer is not None:
            overrides["renderer"] = self.renderer
        if self.minify is not None:
            overrides["minify"] = self.minify
        if self.no_cache:
            overrides["cache"] = False
        return overrides


__all__ = [
    "DEBUG_OPTION",
    "EMOJI_OPTION",
    "INTERVAL_OPTION",
    "MINIFY_OPTION",
    "NO_CACHE_OPTION",
    "PrerenderCLIOptions",
    "RENDERER_OPTION",
    "ROOT_OPTION",
]

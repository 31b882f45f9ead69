# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Renderer executing components through a live module context."""

from __future__ import annotations

from pathlib import Path

from ..compiler import ModuleContext, extract_variables, split_frontmatter
from ..config import RendererKind
from ..errors import ModuleLoadError
from ..logging import ConsoleLogger
from .base import read_source


class FullRenderer:
    """Render components with nested references resolved.

    Returns ``None`` whenever no module context is attached or the component
    module cannot be loaded, so the orchestrator can fall back.
    """

    def __init__(self, logger: ConsoleLogger, *, context: ModuleContext | None = None) -> None:
        self._logger = logger
        self._context = context

    @property
    def kind(self) -> RendererKind:
        """Return :attr:`RendererKind.FULL`."""

        return RendererKind.FULL

    @property
    def context(self) -> ModuleContext | None:
        """Return the attached module context."""

        return self._context

    def attach(self, context: ModuleContext | None) -> None:
        """Attach (or detach with ``None``) the module-execution context."""

        self._context = context

    def render(self, path: Path) -> str | None:
        """Render ``path`` through the module context.

        Raises:
            RenderFailure: If the source is unreadable or rendering fails.
        """

        if self._context is None:
            self._logger.warn("Full renderer requires a module context; use the structural renderer for builds")
            return None
        frontmatter, _template = split_frontmatter(read_source(path))
        props = extract_variables(frontmatter)
        try:
            module = self._context.load_module(path)
        except ModuleLoadError as exc:
            self._logger.warn(f"Failed to load module {path.name}: {exc}")
            return None
        return self._context.render_to_string(module.default, props)


__all__ = ["FullRenderer"]

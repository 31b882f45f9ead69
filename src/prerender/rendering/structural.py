# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Renderer that serialises the parsed tree without resolving imports."""

from __future__ import annotations

from pathlib import Path

from ..compiler import ComponentCompiler, ComponentNode, MarkupCompiler, extract_variables, serialize
from ..config import RendererKind
from ..logging import ConsoleLogger
from .base import read_source


class StructuralRenderer:
    """Render components from their syntax tree alone.

    Nested component references become ``<!-- Component: Name -->``
    placeholders and a warning is logged for each.
    """

    def __init__(self, logger: ConsoleLogger, *, compiler: ComponentCompiler | None = None) -> None:
        self._logger = logger
        self._compiler = compiler or MarkupCompiler()

    @property
    def kind(self) -> RendererKind:
        """Return :attr:`RendererKind.STRUCTURAL`."""

        return RendererKind.STRUCTURAL

    def render(self, path: Path) -> str:
        """Render ``path`` to HTML.

        Raises:
            RenderFailure: If the source is unreadable.
            ComponentParseError: If the source cannot be parsed.
        """

        source = read_source(path)
        tree = self._compiler.parse(source)
        variables = extract_variables(tree.frontmatter)
        self._logger.debug(f"path={path.name} variables={len(variables)}")
        return serialize(tree.children, on_component=self._placeholder, values=variables)

    def _placeholder(self, node: ComponentNode) -> str:
        self._logger.warn(
            f"Component <{node.name} /> found but won't be resolved (use the full renderer for imports)",
        )
        return f"<!-- Component: {node.name} -->"


__all__ = ["StructuralRenderer"]

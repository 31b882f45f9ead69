# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rendering strategies and the fallback chain built from configuration."""

from __future__ import annotations

from ..compiler import ComponentCompiler, ModuleContext
from ..config import RendererKind
from ..logging import ConsoleLogger
from .base import Renderer, read_source
from .full import FullRenderer
from .structural import StructuralRenderer


def build_renderers(
    kind: RendererKind,
    *,
    logger: ConsoleLogger,
    context: ModuleContext | None = None,
    compiler: ComponentCompiler | None = None,
) -> tuple[Renderer, ...]:
    """Return the ordered renderer chain for ``kind``.

    Args:
        kind: Strategy selected in configuration.
        logger: Logger shared by the renderers.
        context: Module context for the full renderer, when available.
        compiler: Compiler used by the structural renderer.

    Returns:
        tuple[Renderer, ...]: ``(full, structural)`` for
        :attr:`RendererKind.FULL`, otherwise ``(structural,)``.
    """

    structural = StructuralRenderer(logger, compiler=compiler)
    if kind is RendererKind.FULL:
        return (FullRenderer(logger, context=context), structural)
    return (structural,)


__all__ = [
    "FullRenderer",
    "Renderer",
    "StructuralRenderer",
    "build_renderers",
    "read_source",
]

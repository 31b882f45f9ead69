# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the structural and full renderers."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest

from prerender.compiler import InProcessModuleContext
from prerender.config import RendererKind
from prerender.errors import RenderFailure
from prerender.logging import ConsoleLogger
from prerender.rendering import FullRenderer, StructuralRenderer, build_renderers

WriteComponent = Callable[[str, str], Path]

PARENT_SOURCE = '---\nimport Child from "./Child.astro";\n---\n<section><Child label="hi" /></section>'
CHILD_SOURCE = "<span>{label}</span>"


def test_structural_substitutes_frontmatter_literals(
    logger: ConsoleLogger,
    write_component: WriteComponent,
) -> None:
    path = write_component("Footer", '---\nyear = "2024"\n---\n<p>{year}</p>')

    assert StructuralRenderer(logger).render(path) == "<p>2024</p>"


def test_structural_leaves_expression_placeholders(
    logger: ConsoleLogger,
    write_component: WriteComponent,
) -> None:
    path = write_component("Counter", "---\nconst count = 1 + 2;\n---\n<p>{count}</p>")

    assert StructuralRenderer(logger).render(path) == "<p>{count}</p>"


def test_structural_renders_nested_component_placeholder(
    logger: ConsoleLogger,
    log_buffer: io.StringIO,
    write_component: WriteComponent,
) -> None:
    write_component("Child", CHILD_SOURCE)
    parent = write_component("Parent", PARENT_SOURCE)

    html = StructuralRenderer(logger).render(parent)

    assert html == "<section><!-- Component: Child --></section>"
    assert "Child" in log_buffer.getvalue()


def test_structural_raises_for_unreadable_source(logger: ConsoleLogger, tmp_path: Path) -> None:
    with pytest.raises(RenderFailure):
        StructuralRenderer(logger).render(tmp_path / "Missing.astro")


def test_full_resolves_nested_components(
    logger: ConsoleLogger,
    project: Path,
    write_component: WriteComponent,
) -> None:
    write_component("Child", CHILD_SOURCE)
    parent = write_component("Parent", PARENT_SOURCE)
    context = InProcessModuleContext(project / "src" / "components" / "lazy")

    html = FullRenderer(logger, context=context).render(parent)

    assert html == "<section><span>hi</span></section>"


def test_full_without_context_returns_none(logger: ConsoleLogger, write_component: WriteComponent) -> None:
    path = write_component("Footer", "<p>static</p>")

    assert FullRenderer(logger).render(path) is None


def test_full_returns_none_when_module_cannot_load(
    logger: ConsoleLogger,
    tmp_path: Path,
    write_component: WriteComponent,
) -> None:
    path = write_component("Footer", "<p>static</p>")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()

    assert FullRenderer(logger, context=InProcessModuleContext(elsewhere)).render(path) is None


def test_build_renderers_orders_fallback_chain(logger: ConsoleLogger) -> None:
    full_chain = build_renderers(RendererKind.FULL, logger=logger)
    structural_chain = build_renderers(RendererKind.STRUCTURAL, logger=logger)

    assert [renderer.kind for renderer in full_chain] == [RendererKind.FULL, RendererKind.STRUCTURAL]
    assert [renderer.kind for renderer in structural_chain] == [RendererKind.STRUCTURAL]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the in-process component compiler."""

from __future__ import annotations

from pathlib import Path

import pytest

from prerender.compiler import (
    ComponentNode,
    ElementNode,
    InProcessModuleContext,
    MarkupCompiler,
    TextNode,
    extract_imports,
    extract_variables,
    serialize,
    split_frontmatter,
    substitute_placeholders,
)
from prerender.errors import ComponentParseError, ComponentResolutionError, ModuleLoadError


def _placeholder(node: ComponentNode) -> str:
    return f"<!-- Component: {node.name} -->"


def test_split_frontmatter() -> None:
    body, template = split_frontmatter('---\nconst title = "Hi";\n---\n<h1>{title}</h1>\n')

    assert body == 'const title = "Hi";'
    assert template == "<h1>{title}</h1>\n"


def test_split_frontmatter_without_fence() -> None:
    assert split_frontmatter("<p>plain</p>") == (None, "<p>plain</p>")


def test_unterminated_frontmatter_raises() -> None:
    with pytest.raises(ComponentParseError):
        split_frontmatter('---\nconst title = "Hi";\n<h1>{title}</h1>\n')


def test_extract_variables_accepts_string_literals_only() -> None:
    frontmatter = "\n".join(
        [
            'const title = "Welcome";',
            "let subtitle = 'Tagline';",
            'year = "2024"',
            "const count = 3;",
            "const total = a + b;",
            'const mixed = "a" + "b";',
        ],
    )

    assert extract_variables(frontmatter) == {
        "title": "Welcome",
        "subtitle": "Tagline",
        "year": "2024",
    }


def test_extract_imports() -> None:
    frontmatter = 'import Card from "./Card.astro";\nimport Icon from \'../Icon\'\n'

    assert extract_imports(frontmatter) == {"Card": "./Card.astro", "Icon": "../Icon"}


def test_substitute_leaves_unknown_placeholders() -> None:
    assert substitute_placeholders("{a} {b}", {"a": "{b}"}) == "{b} {b}"


def test_parser_distinguishes_components() -> None:
    tree = MarkupCompiler().parse("<section><Card title=\"x\" /><ui.Button>Go</ui.Button></section>")

    section = tree.children[0]
    assert isinstance(section, ElementNode)
    card, button = section.children
    assert isinstance(card, ComponentNode) and card.name == "Card"
    assert isinstance(button, ComponentNode) and button.name == "ui.Button"
    assert isinstance(button.children[0], TextNode)


def test_serialize_void_elements_and_entities() -> None:
    tree = MarkupCompiler().parse('<p>A &amp; B<br><img src="/a.png" alt="{alt}"></p>')

    html = serialize(tree.children, on_component=_placeholder, values={"alt": "Logo"})

    assert html == '<p>A &amp; B<br /><img src="/a.png" alt="Logo" /></p>'


def test_serialize_drops_expression_attributes() -> None:
    tree = MarkupCompiler().parse('<a href={url} class="{cls}" data-x={x+1}>link</a>')

    html = serialize(tree.children, on_component=_placeholder, values={"cls": "btn", "url": "/home"})

    assert html == '<a href="/home" class="btn">link</a>'


def test_serialize_keeps_style_bodies_raw() -> None:
    tree = MarkupCompiler().parse("<style>.a { color: red; }</style><div></div>")

    html = serialize(tree.children, on_component=_placeholder, values={"color": "blue"})

    assert html == "<style>.a { color: red; }</style><div></div>"


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_module_context_resolves_nested_components(tmp_path: Path) -> None:
    _write(tmp_path / "Badge.astro", "<b>{label}</b>")
    _write(tmp_path / "Card.astro", '---\nimport Badge from "./Badge";\n---\n<div><Badge label="new" /><slot /></div>')
    page = _write(
        tmp_path / "Page.astro",
        '---\nimport Card from "./Card.astro";\nconst who = "world";\n---\n<Card><p>hello {who}</p></Card>',
    )
    context = InProcessModuleContext(tmp_path)

    module = context.load_module(page)
    html = context.render_to_string(module.default, {})

    assert html == "<div><b>new</b><p>hello world</p></div>"


def test_module_context_rejects_cycles(tmp_path: Path) -> None:
    _write(tmp_path / "A.astro", '---\nimport B from "./B.astro";\n---\n<B />')
    _write(tmp_path / "B.astro", '---\nimport A from "./A.astro";\n---\n<A />')
    context = InProcessModuleContext(tmp_path)

    module = context.load_module(tmp_path / "A.astro")
    with pytest.raises(ComponentResolutionError, match="Circular"):
        context.render_to_string(module.default, {})


def test_module_context_requires_imports(tmp_path: Path) -> None:
    page = _write(tmp_path / "Page.astro", "<Missing />")
    context = InProcessModuleContext(tmp_path)

    with pytest.raises(ComponentResolutionError, match="not imported"):
        context.render_to_string(context.load_module(page).default, {})


def test_module_context_confined_to_root(tmp_path: Path) -> None:
    root = tmp_path / "components"
    root.mkdir()
    outside = _write(tmp_path / "Outside.astro", "<p></p>")

    with pytest.raises(ModuleLoadError):
        InProcessModuleContext(root).load_module(outside)

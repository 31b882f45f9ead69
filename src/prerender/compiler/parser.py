# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Markup parser turning component source into a :class:`ComponentTree`."""

from __future__ import annotations

import re
from html.parser import HTMLParser
from typing import Final, Protocol, runtime_checkable

from .frontmatter import split_frontmatter
from .nodes import Attribute, ComponentNode, ComponentTree, ElementNode, Node, TextNode

VOID_ELEMENTS: Final[frozenset[str]] = frozenset({"img", "br", "hr", "input", "meta", "link"})
_PARSER_VOID_ELEMENTS: Final[frozenset[str]] = VOID_ELEMENTS | {
    "area",
    "base",
    "col",
    "embed",
    "source",
    "track",
    "wbr",
}
_RAW_TAG_RE: Final[re.Pattern[str]] = re.compile(r"<\s*([^\s/>]+)")


@runtime_checkable
class ComponentCompiler(Protocol):
    """Capability turning component source text into a render tree."""

    def parse(self, source: str) -> ComponentTree:
        """Return the tree for ``source``.

        Raises:
            ComponentParseError: If ``source`` cannot be parsed.
        """


def is_component_name(name: str) -> bool:
    """Return whether ``name`` refers to a component rather than an element."""

    return name[:1].isupper() or "." in name


class _TreeBuilder(HTMLParser):
    """Collect nodes while preserving the source case of tag names."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.nodes: list[Node] = []
        self._stack: list[ElementNode | ComponentNode] = []

    def _siblings(self) -> list[Node]:
        return self._stack[-1].children if self._stack else self.nodes

    def _raw_name(self, fallback: str) -> str:
        match = _RAW_TAG_RE.match(self.get_starttag_text() or "")
        return match.group(1) if match else fallback

    def _build(self, tag: str, attrs: list[tuple[str, str | None]]) -> ElementNode | ComponentNode:
        name = self._raw_name(tag)
        attributes = [Attribute(key, value) for key, value in attrs]
        if is_component_name(name):
            return ComponentNode(name=name, attributes=attributes)
        return ElementNode(name=name.lower(), attributes=attributes)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        node = self._build(tag, attrs)
        self._siblings().append(node)
        if isinstance(node, ElementNode) and node.name in _PARSER_VOID_ELEMENTS:
            return
        self._stack.append(node)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._siblings().append(self._build(tag, attrs))

    def handle_endtag(self, tag: str) -> None:
        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].name.lower() == tag:
                del self._stack[index:]
                return

    def handle_data(self, data: str) -> None:
        self._append_text(data)

    def handle_entityref(self, name: str) -> None:
        self._append_text(f"&{name};")

    def handle_charref(self, name: str) -> None:
        self._append_text(f"&#{name};")

    def _append_text(self, text: str) -> None:
        siblings = self._siblings()
        if siblings and isinstance(siblings[-1], TextNode):
            siblings[-1].value += text
        else:
            siblings.append(TextNode(text))


class MarkupCompiler:
    """Default in-process :class:`ComponentCompiler` built on :mod:`html.parser`."""

    def parse(self, source: str) -> ComponentTree:
        """Parse ``source`` into frontmatter text and template nodes.

        Args:
            source: Complete component source.

        Returns:
            ComponentTree: Parsed tree; HTML comments and doctypes are dropped.

        Raises:
            ComponentParseError: If the frontmatter fence is unterminated.
        """

        frontmatter, template = split_frontmatter(source)
        builder = _TreeBuilder()
        builder.feed(template)
        builder.close()
        return ComponentTree(frontmatter=frontmatter, children=builder.nodes)


__all__ = ["ComponentCompiler", "MarkupCompiler", "VOID_ELEMENTS", "is_component_name"]

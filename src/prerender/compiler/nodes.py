# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Node types produced by the component compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(slots=True)
class Attribute:
    """Single attribute; ``value`` is ``None`` for boolean attributes."""

    name: str
    value: str | None = None


@dataclass(slots=True)
class TextNode:
    """Raw text, including entity references, copied from the source."""

    value: str


@dataclass(slots=True)
class ElementNode:
    """Plain HTML element."""

    name: str
    attributes: list[Attribute] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)


@dataclass(slots=True)
class ComponentNode:
    """Reference to another component (capitalised or dotted tag name)."""

    name: str
    attributes: list[Attribute] = field(default_factory=list)
    children: list[Node] = field(default_factory=list)


Node: TypeAlias = "TextNode | ElementNode | ComponentNode"


@dataclass(slots=True)
class ComponentTree:
    """Parsed component: frontmatter script text plus template nodes."""

    frontmatter: str | None
    children: list[Node] = field(default_factory=list)


__all__ = ["Attribute", "ComponentNode", "ComponentTree", "ElementNode", "Node", "TextNode"]

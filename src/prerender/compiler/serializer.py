# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Serialise component trees back to HTML."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

from .frontmatter import PLACEHOLDER_RE, is_expression, substitute_placeholders
from .nodes import Attribute, ComponentNode, ElementNode, Node, TextNode
from .parser import VOID_ELEMENTS

ComponentHandler = Callable[[ComponentNode], str]


def _escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def render_attributes(attributes: Iterable[Attribute], values: Mapping[str, str]) -> str:
    """Return the serialised attribute list, dropping non-placeholder expressions."""

    parts: list[str] = []
    for attribute in attributes:
        if attribute.value is None:
            parts.append(attribute.name)
            continue
        value = attribute.value
        if is_expression(value) and PLACEHOLDER_RE.fullmatch(value) is None:
            continue
        parts.append(f'{attribute.name}="{_escape_attribute(substitute_placeholders(value, values))}"')
    return " ".join(parts)


def serialize(
    nodes: Iterable[Node],
    *,
    on_component: ComponentHandler,
    values: Mapping[str, str] | None = None,
    slot: str | None = None,
) -> str:
    """Serialise ``nodes`` into an HTML string.

    Args:
        nodes: Sibling nodes to render in order.
        on_component: Callback producing markup for component references.
        values: Placeholder values substituted into text and attributes.
        slot: Markup replacing ``<slot>`` elements; ``None`` keeps them as-is.

    Returns:
        str: Serialised markup.
    """

    mapping = values or {}
    return "".join(_serialize_node(node, on_component, mapping, slot) for node in nodes)


def _serialize_node(
    node: Node,
    on_component: ComponentHandler,
    values: Mapping[str, str],
    slot: str | None,
) -> str:
    if isinstance(node, TextNode):
        return substitute_placeholders(node.value, values)
    if isinstance(node, ComponentNode):
        return on_component(node)
    if not isinstance(node, ElementNode):
        return ""
    if node.name == "slot" and slot is not None:
        return slot
    attrs = render_attributes(node.attributes, values)
    open_tag = f"<{node.name} {attrs}" if attrs else f"<{node.name}"
    if not node.children:
        if node.name in VOID_ELEMENTS:
            return f"{open_tag} />"
        return f"{open_tag}></{node.name}>"
    if node.name in {"style", "script"}:
        inner = "".join(child.value for child in node.children if isinstance(child, TextNode))
    else:
        inner = "".join(_serialize_node(child, on_component, values, slot) for child in node.children)
    return f"{open_tag}>{inner}</{node.name}>"


__all__ = ["ComponentHandler", "render_attributes", "serialize"]

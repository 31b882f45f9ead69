# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Default in-process component compiler capability."""

from __future__ import annotations

from .frontmatter import extract_imports, extract_variables, split_frontmatter, substitute_placeholders
from .nodes import Attribute, ComponentNode, ComponentTree, ElementNode, Node, TextNode
from .parser import VOID_ELEMENTS, ComponentCompiler, MarkupCompiler
from .sandbox import CompiledComponent, ComponentModule, InProcessModuleContext, ModuleContext
from .serializer import serialize

__all__ = [
    "Attribute",
    "CompiledComponent",
    "ComponentCompiler",
    "ComponentModule",
    "ComponentNode",
    "ComponentTree",
    "ElementNode",
    "InProcessModuleContext",
    "MarkupCompiler",
    "ModuleContext",
    "Node",
    "TextNode",
    "VOID_ELEMENTS",
    "extract_imports",
    "extract_variables",
    "serialize",
    "split_frontmatter",
    "substitute_placeholders",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Module-loading contexts used by the full renderer.

A context owns module resolution for nested component references. The
in-process implementation only loads sources located beneath its root and
renders nested components recursively.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..errors import ComponentParseError, ComponentResolutionError, ModuleLoadError
from .frontmatter import extract_imports, extract_variables, is_expression
from .nodes import ComponentNode, ComponentTree
from .parser import ComponentCompiler, MarkupCompiler
from .serializer import serialize

DEFAULT_MAX_DEPTH: Final[int] = 32


@dataclass(frozen=True, slots=True)
class CompiledComponent:
    """Executable form of a component source."""

    path: Path
    tree: ComponentTree
    variables: Mapping[str, str] = field(default_factory=dict)
    imports: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ComponentModule:
    """Loaded module exposing its component as the default export."""

    path: Path
    default: CompiledComponent


@runtime_checkable
class ModuleContext(Protocol):
    """Live module-execution capability supplied by the host."""

    def load_module(self, path: Path) -> ComponentModule:
        """Load the module at ``path``.

        Raises:
            ModuleLoadError: If the module cannot be loaded.
        """

    def render_to_string(self, component: CompiledComponent, props: Mapping[str, str]) -> str:
        """Execute ``component`` with ``props`` and return its markup.

        Raises:
            RenderFailure: If rendering fails.
        """


class InProcessModuleContext:
    """Sandboxed context resolving component imports beneath ``root``."""

    def __init__(
        self,
        root: Path,
        *,
        compiler: ComponentCompiler | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """Create a context confined to ``root``.

        Args:
            root: Directory every loaded module must live under.
            compiler: Compiler used to parse module sources.
            max_depth: Maximum component nesting depth.
        """

        self._root = root.resolve()
        self._compiler = compiler or MarkupCompiler()
        self._max_depth = max_depth
        self._modules: dict[Path, tuple[int, ComponentModule]] = {}

    def load_module(self, path: Path) -> ComponentModule:
        """Return the module for ``path``, reusing it while the file is unchanged.

        Raises:
            ModuleLoadError: If the path escapes the root, cannot be read or
            does not parse.
        """

        resolved = path.resolve()
        if not resolved.is_relative_to(self._root):
            raise ModuleLoadError(f"{path} is outside the module root {self._root}")
        try:
            stamp = resolved.stat().st_mtime_ns
            cached = self._modules.get(resolved)
            if cached is not None and cached[0] == stamp:
                return cached[1]
            source = resolved.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ModuleLoadError(f"Unable to load {path}: {exc}") from exc
        try:
            tree = self._compiler.parse(source)
        except ComponentParseError as exc:
            raise ModuleLoadError(f"Unable to parse {path}: {exc}") from exc
        component = CompiledComponent(
            path=resolved,
            tree=tree,
            variables=extract_variables(tree.frontmatter),
            imports=extract_imports(tree.frontmatter),
        )
        module = ComponentModule(path=resolved, default=component)
        self._modules[resolved] = (stamp, module)
        return module

    def render_to_string(self, component: CompiledComponent, props: Mapping[str, str]) -> str:
        """Render ``component`` with nested components resolved.

        Raises:
            ComponentResolutionError: If a nested reference is not imported,
            cannot be loaded, is cyclic or nests too deeply.
        """

        return self._render(component, props, slot=None, chain=())

    def _render(
        self,
        component: CompiledComponent,
        props: Mapping[str, str],
        *,
        slot: str | None,
        chain: tuple[Path, ...],
    ) -> str:
        if component.path in chain:
            cycle = " -> ".join(path.name for path in (*chain, component.path))
            raise ComponentResolutionError(f"Circular component reference: {cycle}")
        if len(chain) >= self._max_depth:
            raise ComponentResolutionError(f"Component nesting exceeds {self._max_depth} levels at {component.path}")
        values = {**props, **component.variables}
        nested_chain = (*chain, component.path)

        def resolve(node: ComponentNode) -> str:
            return self._render_nested(component, node, values, nested_chain)

        return serialize(component.tree.children, on_component=resolve, values=values, slot=slot)

    def _render_nested(
        self,
        parent: CompiledComponent,
        node: ComponentNode,
        values: Mapping[str, str],
        chain: tuple[Path, ...],
    ) -> str:
        local_name = node.name.split(".", 1)[0]
        specifier = parent.imports.get(local_name)
        if specifier is None:
            raise ComponentResolutionError(f"<{node.name} /> is not imported in {parent.path.name}")
        target = self._resolve_specifier(parent.path, specifier)
        try:
            module = self.load_module(target)
        except ModuleLoadError as exc:
            raise ComponentResolutionError(str(exc)) from exc
        props = {
            attribute.name: attribute.value
            for attribute in node.attributes
            if attribute.value is not None and not is_expression(attribute.value)
        }
        slot_html = None
        if node.children:
            slot_html = serialize(
                node.children,
                on_component=lambda child: self._render_nested(parent, child, values, chain),
                values=values,
            )
        return self._render(module.default, props, slot=slot_html, chain=chain)

    @staticmethod
    def _resolve_specifier(importer: Path, specifier: str) -> Path:
        target = (importer.parent / specifier).resolve()
        if not target.suffix:
            target = target.with_suffix(importer.suffix)
        return target


__all__ = [
    "CompiledComponent",
    "ComponentModule",
    "InProcessModuleContext",
    "ModuleContext",
]

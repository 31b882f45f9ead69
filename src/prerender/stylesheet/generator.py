# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Accumulate classes and style blocks across a pass and emit stylesheets."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from ..config import UtilityCSSConfig
from ..filesystem import write_text_atomic
from ..logging import ConsoleLogger
from ..models import StyleBlock
from .compilers import UtilityCompiler

COMPONENT_STYLES_HEADER: Final[str] = "/* Component Styles */"
COMPONENTS_DIRNAME: Final[str] = "components"
BASE_CSS_NAME: Final[str] = "base.css"
MANIFEST_NAME: Final[str] = "manifest.json"


def ledger_path(output_dir: Path, name: str) -> Path:
    """Return the per-component stylesheet path for ``name``."""

    return output_dir / COMPONENTS_DIRNAME / f"{name}.css"


def write_ledger(output_dir: Path, name: str, css: str) -> Path:
    """Persist the raw component CSS so cached passes can re-use it."""

    path = ledger_path(output_dir, name)
    write_text_atomic(path, f"{css}\n" if css else "")
    return path


def read_ledger(output_dir: Path, name: str) -> StyleBlock | None:
    """Return the recorded style block for ``name`` or ``None`` when empty."""

    path = ledger_path(output_dir, name)
    try:
        css = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        return None
    return StyleBlock(owner=name, css=css) if css else None


class StylesheetGenerator:
    """Collect utility classes and component styles for one orchestrator.

    Contributions are keyed by owner so incremental rebuilds can drop a
    single component's classes and styles before re-adding them. A discarded
    owner keeps its slot, which keeps style blocks in discovery order.
    """

    def __init__(
        self,
        compiler: UtilityCompiler,
        config: UtilityCSSConfig,
        logger: ConsoleLogger,
        *,
        generate_utility_css: bool = True,
    ) -> None:
        self._compiler = compiler
        self._config = config
        self._logger = logger
        self._generate_utility_css = generate_utility_css
        self._classes: dict[str | None, set[str]] = {}
        self._styles: dict[str | None, list[StyleBlock]] = {}

    @property
    def classes(self) -> frozenset[str]:
        """Return every class token collected so far."""

        collected: set[str] = set()
        for tokens in self._classes.values():
            collected.update(tokens)
        return frozenset(collected)

    @property
    def styles(self) -> list[StyleBlock]:
        """Return collected style blocks in the order their owners appeared."""

        return [block for blocks in self._styles.values() for block in blocks]

    def add_classes(self, classes: Iterable[str], owner: str | None = None) -> None:
        tokens = {token for token in classes if token}
        self._classes.setdefault(owner, set()).update(tokens)

    def add_styles(self, blocks: Iterable[StyleBlock]) -> None:
        for block in blocks:
            if block.css.strip():
                self._styles.setdefault(block.owner, []).append(block)

    def discard(self, owner: str) -> None:
        """Drop the contributions recorded for ``owner``."""

        if owner in self._classes:
            self._classes[owner] = set()
        if owner in self._styles:
            self._styles[owner] = []

    def clear(self) -> None:
        """Reset both accumulators."""

        self._classes.clear()
        self._styles.clear()

    def utility_css(self) -> str:
        """Return compiled utility rules for the collected classes."""

        if not self._generate_utility_css:
            return ""
        return self._compiler.compile(self._config, self.classes)

    def generate(self, path: Path) -> Path | None:
        """Write the combined stylesheet to ``path``.

        Args:
            path: Destination file; parent directories are created.

        Returns:
            Path | None: ``path`` when a file was written, otherwise ``None``.

        Raises:
            UtilityCompilerError: If the utility compiler fails.
            WriteFailure: If the stylesheet cannot be written.
        """

        classes = self.classes
        blocks = self.styles
        if not classes and not blocks:
            self._logger.info("No classes or styles collected; skipping stylesheet")
            return None

        component_css = "\n\n".join(block.render() for block in blocks)
        sections: list[str] = []
        if self._generate_utility_css:
            utility = self.utility_css().strip()
            if utility:
                sections.append(utility)
            if component_css:
                sections.append(f"{COMPONENT_STYLES_HEADER}\n{component_css}")
        elif component_css:
            sections.append(component_css)

        if not sections:
            self._logger.info("Nothing to emit; skipping stylesheet")
            return None

        write_text_atomic(path, "\n\n".join(sections) + "\n")
        self._logger.ok(f"Stylesheet written ({len(classes)} classes, {len(blocks)} style blocks)")
        self._logger.debug(f"stylesheet={path} classes={len(classes)} blocks={len(blocks)}")
        return path

    def generate_modules(self, output_dir: Path) -> Path:
        """Write ``base.css``, per-component CSS files and the manifest.

        Returns:
            Path: Location of the written manifest.
        """

        base = self.utility_css().strip()
        write_text_atomic(output_dir / BASE_CSS_NAME, f"{base}\n" if base else "")

        components: dict[str, str] = {}
        for owner, blocks in self._styles.items():
            if owner is None or not blocks:
                continue
            css = "\n\n".join(block.css for block in blocks)
            write_ledger(output_dir, owner, css)
            components[owner] = f"{COMPONENTS_DIRNAME}/{owner}.css"

        manifest_path = output_dir / MANIFEST_NAME
        payload = {"components": dict(sorted(components.items()))}
        write_text_atomic(manifest_path, json.dumps(payload, indent=2) + "\n")
        self._logger.ok(f"CSS modules written ({len(components)} component stylesheets)")
        return manifest_path


__all__ = [
    "BASE_CSS_NAME",
    "COMPONENTS_DIRNAME",
    "COMPONENT_STYLES_HEADER",
    "MANIFEST_NAME",
    "StylesheetGenerator",
    "ledger_path",
    "read_ledger",
    "write_ledger",
]

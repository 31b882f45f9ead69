# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data structures flowing through one pipeline pass."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .config import RendererKind


def content_hash(data: bytes) -> str:
    """Return the deterministic digest used to detect source changes."""

    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True, slots=True)
class SourceComponent:
    """Snapshot of a component source file taken at the start of processing.

    Attributes:
        path: Absolute path of the source file.
        content: Raw source bytes.
        hash: Digest of ``content``.
        name: Logical name derived from the filename.
    """

    path: Path
    content: bytes
    hash: str
    name: str

    @classmethod
    def read(cls, path: Path) -> SourceComponent:
        """Read ``path`` from disk and capture its hash.

        Raises:
            OSError: If the file cannot be read.
        """

        data = path.read_bytes()
        return cls(path=path, content=data, hash=content_hash(data), name=logical_name(path))


def logical_name(path: Path) -> str:
    """Return the logical component name for ``path``."""

    return path.stem


@dataclass(frozen=True, slots=True)
class StyleBlock:
    """Raw CSS text tagged with the component it was extracted from."""

    owner: str
    css: str

    def render(self) -> str:
        """Return the block prefixed with a provenance comment."""

        return f"/* Styles from {self.owner} */\n{self.css}"


@dataclass(frozen=True, slots=True)
class RenderedFragment:
    """Output of a renderer before cleaning."""

    name: str
    html: str
    styles: tuple[StyleBlock, ...] = ()


class ComponentState(str, Enum):
    """States a component moves through during one pipeline pass."""

    DISCOVERED = "discovered"
    CACHED = "cached"
    RENDERING = "rendering"
    RENDERED = "rendered"
    EXTRACTING = "extracting"
    WRITTEN = "written"
    FAILED = "failed"


@dataclass(slots=True)
class ComponentOutcome:
    """Final state reached by a single component."""

    path: Path
    name: str
    state: ComponentState = ComponentState.DISCOVERED
    renderer: RendererKind | None = None
    output: Path | None = None
    error: str | None = None


@dataclass(slots=True)
class PassReport:
    """Summary of one full pipeline pass."""

    outcomes: list[ComponentOutcome] = field(default_factory=list)
    stylesheet: Path | None = None

    def _names(self, state: ComponentState) -> list[str]:
        return [outcome.name for outcome in self.outcomes if outcome.state is state]

    @property
    def rendered(self) -> list[str]:
        """Return names of components written during the pass."""

        return self._names(ComponentState.WRITTEN)

    @property
    def cached(self) -> list[str]:
        """Return names of components skipped because their hash matched."""

        return self._names(ComponentState.CACHED)

    @property
    def failed(self) -> list[str]:
        """Return names of components that failed to render or write."""

        return self._names(ComponentState.FAILED)

    def outcome_for(self, name: str) -> ComponentOutcome | None:
        """Return the outcome recorded for ``name`` when present."""

        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None


__all__ = [
    "ComponentOutcome",
    "ComponentState",
    "PassReport",
    "RenderedFragment",
    "SourceComponent",
    "StyleBlock",
    "content_hash",
    "logical_name",
]

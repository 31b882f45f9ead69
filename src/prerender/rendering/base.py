# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared renderer contract."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from ..config import RendererKind
from ..errors import RenderFailure


@runtime_checkable
class Renderer(Protocol):
    """Turn one component source file into an HTML string.

    ``render`` returns ``None`` when the strategy cannot handle the source;
    callers treat that as a signal to try the next strategy.
    """

    @property
    def kind(self) -> RendererKind:
        """Return the strategy implemented by the renderer."""

    def render(self, path: Path) -> str | None:
        """Render the component at ``path``.

        Raises:
            RenderFailure: If the source is unreadable or cannot be rendered.
        """


def read_source(path: Path) -> str:
    """Return the UTF-8 text of ``path``.

    Raises:
        RenderFailure: If the file cannot be read or decoded.
    """

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RenderFailure(f"Unable to read {path}: {exc}") from exc


__all__ = ["Renderer", "read_source"]

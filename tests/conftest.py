# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from prerender.config import PrerenderConfig
from prerender.logging import ConsoleLogger


@pytest.fixture
def log_buffer() -> io.StringIO:
    """Return the buffer the test logger writes to."""
    return io.StringIO()


@pytest.fixture
def logger(log_buffer: io.StringIO) -> ConsoleLogger:
    """Return a colourless, emoji-free logger capturing output in memory."""
    console = Console(file=log_buffer, no_color=True, width=200, highlight=False)
    return ConsoleLogger(console=console, use_emoji=False, debug_enabled=True, use_color=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Return a project root with an empty components directory."""
    (tmp_path / "src" / "components" / "lazy").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def write_component(project: Path) -> Callable[[str, str], Path]:
    """Return a helper writing ``<name>.astro`` under the components directory."""

    def _write(name: str, source: str) -> Path:
        path = project / "src" / "components" / "lazy" / f"{name}.astro"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config() -> PrerenderConfig:
    """Return the default configuration."""
    return PrerenderConfig()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the console logging helpers."""

from __future__ import annotations

import io

from rich.console import Console

from prerender.logging import ConsoleLogger, build_logger, emoji, get_console_manager


def _logger(**kwargs) -> tuple[ConsoleLogger, io.StringIO]:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, width=200)
    return ConsoleLogger(console=console, use_color=False, **kwargs), buffer


def test_tag_prefixes_every_message() -> None:
    logger, buffer = _logger(use_emoji=False, tag="prerender")

    logger.ok("rendered Footer")
    logger.fail("broken Header")

    assert buffer.getvalue().splitlines() == ["[prerender] rendered Footer", "[prerender] broken Header"]


def test_debug_is_silent_unless_enabled() -> None:
    quiet, quiet_buffer = _logger(use_emoji=False)
    loud, loud_buffer = _logger(use_emoji=False, debug_enabled=True)

    quiet.debug("component=Footer bytes=12")
    loud.debug("component=Footer bytes=12")

    assert quiet_buffer.getvalue() == ""
    assert loud_buffer.getvalue().strip() == "[debug] component=Footer bytes=12"


def test_emoji_toggle() -> None:
    assert emoji("✅ ", True) == "✅ "
    assert emoji("✅ ", False) == ""


def test_console_manager_caches_consoles() -> None:
    manager = get_console_manager()

    assert manager.get(color=False, emoji=False) is manager.get(color=False, emoji=False)


def test_build_logger_applies_flags() -> None:
    logger = build_logger(emoji=False, debug=True, no_color=True, tag="site")

    assert logger.tag == "site"
    assert logger.debug_enabled
    assert not logger.use_emoji
    assert not logger.use_color

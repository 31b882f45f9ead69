# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Literal

from rich.console import Console
from rich.rule import Rule
from rich.text import Text


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal.

    Returns:
        bool: ``True`` when ``sys.stdout`` reports TTY support, ``False`` otherwise.
    """

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Provision Rich :class:`Console` instances keyed by colour and emoji settings."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return a Rich console configured for ``color`` and ``emoji`` preferences.

        Args:
            color: ``True`` when ANSI colour output should be enabled.
            emoji: ``True`` when Rich should render emoji glyphs.

        Returns:
            Console: Cached or newly constructed console matching the preferences.
        """

        tty = detect_tty()
        key = (color, emoji, tty)
        if key not in self._cache:
            color_system: Literal["auto", "standard", "256", "truecolor", "windows"] | None = (
                "auto" if color and tty else None
            )
            self._cache[key] = Console(
                color_system=color_system,
                force_terminal=tty,
                no_color=not (color and tty),
                emoji=emoji,
                soft_wrap=True,
                highlight=False,
            )
        return self._cache[key]


_CONSOLE_MANAGER = RichConsoleManager()


def get_console_manager() -> RichConsoleManager:
    """Return the process-wide console manager."""

    return _CONSOLE_MANAGER


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(console: Console, msg: str, *, style: str | None, use_color: bool) -> None:
    text = Text(msg)
    if style and use_color:
        text.stylize(style)
    console.print(text)


def _default_console(use_emoji: bool, use_color: bool | None) -> tuple[Console, bool]:
    color_enabled = detect_tty() if use_color is None else use_color
    return get_console_manager().get(color=color_enabled, emoji=use_emoji), color_enabled


def section(title: str, *, use_color: bool) -> None:
    """Render a section header to delineate console output blocks.

    Args:
        title: Section title displayed to the user.
        use_color: Flag indicating whether ANSI colour support is desired.
    """

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    console, color = _default_console(use_emoji, use_color)
    _print_line(console, f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_color=color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    console, color = _default_console(use_emoji, use_color)
    _print_line(console, f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_color=color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    console, color = _default_console(use_emoji, use_color)
    _print_line(console, f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_color=color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    console, color = _default_console(use_emoji, use_color)
    _print_line(console, f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_color=color)


@dataclass(slots=True)
class ConsoleLogger:
    """Tagged logger handed to every build-time collaborator.

    Attributes:
        console: Rich console receiving the output.
        use_emoji: Whether messages are prefixed with emoji glyphs.
        debug_enabled: Whether :meth:`debug` produces output.
        tag: Optional prefix rendered in brackets before each message.
    """

    console: Console
    use_emoji: bool = True
    debug_enabled: bool = False
    tag: str | None = None
    use_color: bool = field(default=True)
    _key_value_re: re.Pattern[str] = re.compile(r"([\w-]+)=(\".*?\"|\S+)")

    def _format(self, symbol: str, message: str) -> str:
        prefix = emoji(symbol, self.use_emoji)
        tag = f"[{self.tag}] " if self.tag else ""
        return f"{prefix}{tag}{message}"

    def info(self, message: str) -> None:
        """Log an informational message.

        Args:
            message: Text describing progress.
        """

        _print_line(self.console, self._format("ℹ️ ", message), style="cyan", use_color=self.use_color)

    def ok(self, message: str) -> None:
        """Log a success message honouring emoji preferences.

        Args:
            message: Text describing the successful state.
        """

        _print_line(self.console, self._format("✅ ", message), style="green", use_color=self.use_color)

    def warn(self, message: str) -> None:
        """Log a warning message honouring emoji preferences.

        Args:
            message: Text describing the warning condition.
        """

        _print_line(self.console, self._format("⚠️ ", message), style="yellow", use_color=self.use_color)

    def fail(self, message: str) -> None:
        """Log a failure message honouring emoji preferences.

        Args:
            message: Text describing the failure state.
        """

        _print_line(self.console, self._format("❌ ", message), style="red", use_color=self.use_color)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled.

        Args:
            message: Debug payload rendered with simple ``key=value`` highlighting.
        """

        if not self.debug_enabled:
            return
        text = Text("[debug] ", style="bold cyan")
        cursor = 0
        for match in self._key_value_re.finditer(message):
            start, end = match.span()
            if start > cursor:
                text.append(message[cursor:start], style="dim")
            text.append(match.group(1), style="bold magenta")
            text.append("=", style="dim")
            text.append(match.group(2), style="bold green")
            cursor = end
        if cursor < len(message):
            text.append(message[cursor:], style="dim")
        self.console.print(text)


def build_logger(
    *,
    emoji: bool = True,
    debug: bool = False,
    no_color: bool = False,
    tag: str | None = None,
) -> ConsoleLogger:
    """Return a :class:`ConsoleLogger` bound to a dedicated Rich console.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.
        tag: Optional tag prefixed to every message.

    Returns:
        ConsoleLogger: Logger instance bound to a dedicated Rich console.
    """

    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    return ConsoleLogger(
        console=console,
        use_emoji=emoji,
        debug_enabled=debug,
        tag=tag,
        use_color=not no_color,
    )


__all__ = [
    "ConsoleLogger",
    "RichConsoleManager",
    "build_logger",
    "detect_tty",
    "emoji",
    "fail",
    "get_console_manager",
    "info",
    "ok",
    "section",
    "warn",
]

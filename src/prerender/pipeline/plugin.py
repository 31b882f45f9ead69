# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host build-tool lifecycle adapter around the orchestrator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from ..compiler import ModuleContext
from ..config import PrerenderConfig, load_config
from ..errors import ConfigError
from ..logging import ConsoleLogger, build_logger
from ..models import ComponentOutcome, PassReport
from .orchestrator import PipelineOrchestrator
from .watch import WatchCallback, WatchEventKind


@runtime_checkable
class FileWatcher(Protocol):
    """Watcher capability exposed by a dev server."""

    def add(self, directory: Path) -> None: ...

    def on(self, kind: WatchEventKind, callback: WatchCallback) -> None: ...


@runtime_checkable
class DevServerHandle(Protocol):
    """Dev-server surface the plugin wires itself into."""

    @property
    def watcher(self) -> FileWatcher: ...

    @property
    def module_context(self) -> ModuleContext | None: ...


@dataclass(frozen=True, slots=True)
class LocalDevServer:
    """Dev-server handle assembled by the command line ``watch`` command."""

    watcher: FileWatcher
    module_context: ModuleContext | None = None


class PrerenderPlugin:
    """Translate host lifecycle calls into orchestrator operations.

    ``config_resolved`` must run first; it loads configuration for the root
    and builds the orchestrator used by the remaining hooks.
    """

    def __init__(
        self,
        overrides: Mapping[str, Any] | None = None,
        *,
        logger: ConsoleLogger | None = None,
        emoji: bool = True,
        debug: bool = False,
    ) -> None:
        self._overrides = dict(overrides or {})
        self._logger = logger
        self._emoji = emoji
        self._debug = debug
        self._orchestrator: PipelineOrchestrator | None = None
        self._mode: str | None = None

    @property
    def name(self) -> str:
        """Return the configured plugin name."""

        if self._orchestrator is None:
            return PrerenderConfig().name
        return self._orchestrator.config.name

    @property
    def mode(self) -> str | None:
        return self._mode

    @property
    def orchestrator(self) -> PipelineOrchestrator:
        """Return the orchestrator built by :meth:`config_resolved`.

        Raises:
            ConfigError: If the configuration has not been resolved yet.
        """

        if self._orchestrator is None:
            raise ConfigError("config_resolved() must be called before using the plugin")
        return self._orchestrator

    def config_resolved(self, root: Path, mode: str) -> PrerenderConfig:
        """Load configuration for ``root`` and prepare the orchestrator."""

        config = load_config(root, self._overrides)
        logger = self._logger or build_logger(emoji=self._emoji, debug=self._debug, tag=config.name)
        self._logger = logger
        self._orchestrator = PipelineOrchestrator(config, root, logger)
        self._mode = mode
        logger.debug(f"root={root} mode={mode} renderer={config.renderer.value}")
        return config

    def build_start(self) -> PassReport:
        """Run one full prerender pass."""

        return self.orchestrator.run_pass()

    def configure_server(self, handle: DevServerHandle) -> None:
        """Attach the dev-server module context and register watch callbacks."""

        orchestrator = self.orchestrator
        orchestrator.attach_context(handle.module_context)
        handle.watcher.add(orchestrator.components_dir)
        handle.watcher.on(WatchEventKind.CHANGE, orchestrator.handle_change)
        handle.watcher.on(WatchEventKind.ADD, orchestrator.handle_add)
        handle.watcher.on(WatchEventKind.REMOVE, orchestrator.handle_remove)
        if self._logger is not None:
            self._logger.info(f"Watching {orchestrator.components_dir} for component changes")

    def flush(self) -> list[ComponentOutcome]:
        """Process any queued watch events."""

        return self.orchestrator.drain_events()


__all__ = ["DevServerHandle", "FileWatcher", "LocalDevServer", "PrerenderPlugin"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""File-watch events, their coalescing queue and a polling watcher."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from ..discovery import ALWAYS_EXCLUDE_DIRS


class WatchEventKind(str, Enum):
    """Kinds of filesystem change reported by a watcher."""

    CHANGE = "change"
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """Single filesystem notification for one path."""

    kind: WatchEventKind
    path: Path


WatchCallback = Callable[[Path], None]


class WatchEventQueue:
    """Serialise watch events, keeping only the latest event per path.

    Paths keep the position of their first pending event, so draining
    preserves arrival order while a burst of edits to one file collapses
    into one reprocessing step.
    """

    def __init__(self) -> None:
        self._pending: dict[Path, WatchEvent] = {}
        self._lock = threading.Lock()

    def put(self, event: WatchEvent) -> None:
        with self._lock:
            self._pending[event.path] = event

    def drain(self) -> list[WatchEvent]:
        """Return pending events in arrival order and empty the queue."""

        with self._lock:
            events = list(self._pending.values())
            self._pending.clear()
        return events

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def __bool__(self) -> bool:
        return len(self) > 0


class FileState(BaseModel):
    """Filesystem metadata used to detect edits between polls."""

    model_config = ConfigDict(frozen=True)

    mtime_ns: int
    size: int


class PollingWatcher:
    """Detect added, changed and removed files by comparing snapshots."""

    def __init__(
        self,
        *directories: Path,
        matches: Callable[[Path], bool] | None = None,
        interval: float = 0.5,
    ) -> None:
        self._directories: list[Path] = [directory.resolve() for directory in directories]
        self._matches = matches or (lambda _path: True)
        self._interval = interval
        self._callbacks: dict[WatchEventKind, list[WatchCallback]] = {kind: [] for kind in WatchEventKind}
        self._state: dict[Path, FileState] = {}

    @property
    def interval(self) -> float:
        """Return the delay between polls in seconds."""

        return self._interval

    def add(self, directory: Path) -> None:
        """Start watching ``directory`` and record its current contents."""

        resolved = directory.resolve()
        if resolved in self._directories:
            return
        self._directories.append(resolved)
        self._state.update(self._scan(resolved))

    def on(self, kind: WatchEventKind, callback: WatchCallback) -> None:
        """Register ``callback`` for events of ``kind``."""

        self._callbacks[kind].append(callback)

    def snapshot(self) -> dict[Path, FileState]:
        """Return the current state of every watched file."""

        state: dict[Path, FileState] = {}
        for directory in self._directories:
            state.update(self._scan(directory))
        return state

    def prime(self) -> None:
        """Record the current state without emitting events."""

        self._state = self.snapshot()

    def poll(self) -> list[WatchEvent]:
        """Compare against the previous snapshot and dispatch callbacks.

        Returns:
            list[WatchEvent]: Events detected by this poll, sorted by path.
        """

        current = self.snapshot()
        events: list[WatchEvent] = []
        for path in sorted(current.keys() | self._state.keys()):
            before = self._state.get(path)
            after = current.get(path)
            if before is None:
                events.append(WatchEvent(WatchEventKind.ADD, path))
            elif after is None:
                events.append(WatchEvent(WatchEventKind.REMOVE, path))
            elif before != after:
                events.append(WatchEvent(WatchEventKind.CHANGE, path))
        self._state = current
        for event in events:
            for callback in self._callbacks[event.kind]:
                callback(event.path)
        return events

    def run(self, stop: threading.Event, *, on_tick: Callable[[], None] | None = None) -> None:
        """Poll until ``stop`` is set, calling ``on_tick`` after every poll."""

        while not stop.wait(self._interval):
            self.poll()
            if on_tick is not None:
                on_tick()

    def _scan(self, directory: Path) -> dict[Path, FileState]:
        state: dict[Path, FileState] = {}
        for path in self._walk(directory):
            try:
                stat = path.stat()
            except FileNotFoundError:
                continue
            state[path] = FileState(mtime_ns=stat.st_mtime_ns, size=stat.st_size)
        return state

    def _walk(self, directory: Path) -> Iterator[Path]:
        if not directory.is_dir():
            return
        for current, dirnames, filenames in os.walk(directory):
            dirnames[:] = [name for name in dirnames if not name.startswith(".") and name not in ALWAYS_EXCLUDE_DIRS]
            for filename in filenames:
                candidate = Path(current) / filename
                if self._matches(candidate):
                    yield candidate


__all__ = [
    "FileState",
    "PollingWatcher",
    "WatchCallback",
    "WatchEvent",
    "WatchEventKind",
    "WatchEventQueue",
]

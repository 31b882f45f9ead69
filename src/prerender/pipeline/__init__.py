# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pipeline orchestration, watch-mode plumbing and the host plugin adapter."""

from __future__ import annotations

from .orchestrator import PipelineOrchestrator
from .plugin import DevServerHandle, FileWatcher, LocalDevServer, PrerenderPlugin
from .watch import FileState, PollingWatcher, WatchEvent, WatchEventKind, WatchEventQueue

__all__ = [
    "DevServerHandle",
    "FileState",
    "FileWatcher",
    "LocalDevServer",
    "PipelineOrchestrator",
    "PollingWatcher",
    "PrerenderPlugin",
    "WatchEvent",
    "WatchEventKind",
    "WatchEventQueue",
]

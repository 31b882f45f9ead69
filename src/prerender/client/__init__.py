# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime loader that fetches prerendered fragments on demand."""

from __future__ import annotations

from .config import LoaderConfig
from .dom import Document, SoupDocument
from .loader import LazyFragmentLoader, create_lazy_loader
from .stats import LoadRecord, LoadStats, SecondaryAsset
from .viewport import (
    ManualResourceTimeline,
    ManualViewport,
    Observation,
    ResourceEntry,
    ResourceTimingSource,
    Viewport,
)

__all__ = [
    "Document",
    "LazyFragmentLoader",
    "LoadRecord",
    "LoadStats",
    "LoaderConfig",
    "ManualResourceTimeline",
    "ManualViewport",
    "Observation",
    "ResourceEntry",
    "ResourceTimingSource",
    "SecondaryAsset",
    "SoupDocument",
    "Viewport",
    "create_lazy_loader",
]

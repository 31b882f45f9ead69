# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load statistics collected by the client runtime."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SecondaryAsset:
    """Resource fetched by the page shortly after a fragment was loaded."""

    url: str
    bytes: int
    duration: float
    type: str


@dataclass(slots=True)
class LoadRecord:
    """Details of the most recent load of one component."""

    component_name: str
    duration: float
    bytes: int
    from_cache: bool
    timestamp: float
    secondary_assets: list[SecondaryAsset] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LoadStats:
    """Cumulative counters since construction or the last reset."""

    total_loads: int
    cache_hits: int
    cache_misses: int
    errors: int
    average_load_time: float
    total_bytes: int


@dataclass(slots=True)
class StatsTracker:
    """Mutable counters behind :class:`LoadStats`."""

    total_loads: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    errors: int = 0
    total_load_time: float = 0.0
    total_bytes: int = 0
    history: dict[str, LoadRecord] = field(default_factory=dict)

    def record(self, record: LoadRecord) -> None:
        """Count a successful load described by ``record``."""

        self.total_loads += 1
        self.total_load_time += record.duration
        if not record.from_cache:
            self.total_bytes += record.bytes
        self.history[record.component_name] = record

    def snapshot(self) -> LoadStats:
        average = self.total_load_time / self.total_loads if self.total_loads else 0.0
        return LoadStats(
            total_loads=self.total_loads,
            cache_hits=self.cache_hits,
            cache_misses=self.cache_misses,
            errors=self.errors,
            average_load_time=average,
            total_bytes=self.total_bytes,
        )

    def detailed_history(self) -> list[LoadRecord]:
        """Return the latest record per component, newest first."""

        return sorted(self.history.values(), key=lambda record: record.timestamp, reverse=True)

    def reset(self) -> None:
        self.total_loads = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.errors = 0
        self.total_load_time = 0.0
        self.total_bytes = 0
        self.history.clear()


__all__ = ["LoadRecord", "LoadStats", "SecondaryAsset", "StatsTracker"]

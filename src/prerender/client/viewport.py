# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Viewport and resource-timing capabilities plus manual implementations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Observation(Protocol):
    """Handle returned by an observer registration."""

    def disconnect(self) -> None: ...


@runtime_checkable
class Viewport(Protocol):
    """Notify when an element enters the viewport."""

    def observe(
        self,
        element: Any,
        callback: Callable[[], None],
        *,
        root_margin: str,
    ) -> Observation: ...


@dataclass(frozen=True, slots=True)
class ResourceEntry:
    """Timing entry for a resource the page fetched.

    ``start_time`` uses the loader's clock (seconds); ``duration`` is in
    milliseconds.
    """

    name: str
    start_time: float
    duration: float = 0.0
    initiator_type: str = "other"
    transfer_size: int = 0
    decoded_body_size: int = 0
    encoded_body_size: int = 0

    @property
    def size(self) -> int:
        return self.transfer_size or self.decoded_body_size or self.encoded_body_size or 0


@runtime_checkable
class ResourceTimingSource(Protocol):
    """Passive feed of resource timing entries."""

    def subscribe(self, callback: Callable[[ResourceEntry], None]) -> Observation: ...


class _Subscription:
    def __init__(self, registry: list[_Subscription], callback: Callable[..., None], target: Any = None) -> None:
        self._registry = registry
        self.callback = callback
        self.target = target
        registry.append(self)

    @property
    def connected(self) -> bool:
        return self in self._registry

    def disconnect(self) -> None:
        if self in self._registry:
            self._registry.remove(self)


class ManualViewport:
    """Viewport driven explicitly through :meth:`reveal`."""

    def __init__(self) -> None:
        self._observations: list[_Subscription] = []

    @property
    def active(self) -> int:
        """Return the number of connected observations."""

        return len(self._observations)

    def observe(
        self,
        element: Any,
        callback: Callable[[], None],
        *,
        root_margin: str,
    ) -> Observation:
        del root_margin
        return _Subscription(self._observations, callback, element)

    def reveal(self, element: Any) -> int:
        """Fire callbacks observing ``element``; return how many fired."""

        matched = [entry for entry in self._observations if entry.target is element]
        for entry in matched:
            entry.callback()
        return len(matched)


class ManualResourceTimeline:
    """Buffered resource feed; new subscribers receive earlier entries too."""

    def __init__(self) -> None:
        self._entries: list[ResourceEntry] = []
        self._subscribers: list[_Subscription] = []

    def subscribe(self, callback: Callable[[ResourceEntry], None]) -> Observation:
        subscription = _Subscription(self._subscribers, callback)
        for entry in self._entries:
            callback(entry)
        return subscription

    def record(self, entry: ResourceEntry) -> None:
        self._entries.append(entry)
        for subscription in list(self._subscribers):
            subscription.callback(entry)


__all__ = [
    "ManualResourceTimeline",
    "ManualViewport",
    "Observation",
    "ResourceEntry",
    "ResourceTimingSource",
    "Viewport",
]

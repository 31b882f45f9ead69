# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Persisted content-hash cache deciding which components need rendering."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

from .filesystem import write_text_atomic


class ContentCache:
    """Map source paths to the hash of their last successfully written content.

    The table is read from ``path`` once per process and written back in a
    single atomic replace. A missing or unreadable store is an empty cache.
    """

    def __init__(self, path: Path) -> None:
        """Initialise the cache persisted at ``path``.

        Args:
            path: JSON document holding the ``source path -> hash`` table.
        """

        self._path = path
        self._entries: dict[str, str] = {}
        self._loaded = False

    @property
    def path(self) -> Path:
        """Return the persisted store location."""

        return self._path

    @property
    def loaded(self) -> bool:
        """Return whether :meth:`load` has populated the table."""

        return self._loaded

    def load(self) -> None:
        """Populate the table from disk unless it was already loaded."""

        if self._loaded:
            return
        self._entries = self._read()
        self._loaded = True

    def save(self) -> None:
        """Persist the table atomically.

        Raises:
            WriteFailure: If the store cannot be written.
        """

        payload = json.dumps(dict(sorted(self._entries.items())), indent=2)
        write_text_atomic(self._path, payload + "\n")

    def is_cached(self, path: Path | str, digest: str) -> bool:
        """Return ``True`` when the stored hash for ``path`` equals ``digest``."""

        return self._entries.get(str(path)) == digest

    def get(self, path: Path | str) -> str | None:
        """Return the stored hash for ``path``."""

        return self._entries.get(str(path))

    def set(self, path: Path | str, digest: str) -> None:
        """Record ``digest`` as the last written hash for ``path``."""

        self._entries[str(path)] = digest

    def delete(self, path: Path | str) -> None:
        """Forget ``path``; deleting an unknown path is a no-op."""

        self._entries.pop(str(path), None)

    def clear(self) -> None:
        """Drop every entry."""

        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        return str(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def _read(self) -> dict[str, str]:
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            return {}
        if not isinstance(raw, dict):
            return {}
        return {key: value for key, value in raw.items() if isinstance(key, str) and isinstance(value, str)}


__all__ = ["ContentCache"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem discovery of component source files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Final

from .errors import SourceNotFoundError

ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset({"node_modules", "__pycache__"})


class ComponentDiscovery:
    """Traverse a components directory collecting candidate sources."""

    def __init__(
        self,
        root: Path,
        *,
        extensions: Sequence[str],
        exclude: Sequence[str] = (),
    ) -> None:
        """Create a discovery strategy.

        Args:
            root: Project root used to build the relative paths ``exclude``
                is matched against.
            extensions: File suffixes recognised as component sources.
            exclude: Substrings; any relative path containing one is skipped.
        """

        self._root = root
        self._extensions = tuple(extensions)
        self._exclude = tuple(pattern for pattern in exclude if pattern)

    def matches(self, path: Path) -> bool:
        """Return whether ``path`` is an eligible component source."""

        if not path.name.endswith(self._extensions):
            return False
        relative = _relative_text(path, self._root)
        return not any(pattern in relative for pattern in self._exclude)

    def discover(self, directory: Path) -> list[Path]:
        """Return sorted absolute paths of components below ``directory``.

        Args:
            directory: Components root to walk.

        Returns:
            list[Path]: Eligible component sources.

        Raises:
            SourceNotFoundError: If ``directory`` does not exist.
        """

        if not directory.is_dir():
            raise SourceNotFoundError(directory)
        return sorted(self._walk(directory.resolve()))

    def _walk(self, base: Path) -> Iterator[Path]:
        for current, dirnames, filenames in os.walk(base):
            dirnames[:] = sorted(_visible_dirs(dirnames))
            current_path = Path(current)
            for filename in filenames:
                candidate = current_path / filename
                if self.matches(candidate):
                    yield candidate


def _visible_dirs(names: Iterable[str]) -> Iterator[str]:
    for name in names:
        if name.startswith(".") or name in ALWAYS_EXCLUDE_DIRS:
            continue
        yield name


def _relative_text(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ["ALWAYS_EXCLUDE_DIRS", "ComponentDiscovery"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for reasoning about filesystem paths and writing artifacts."""

from __future__ import annotations

import os
import tempfile
from os import PathLike
from pathlib import Path

from .errors import WriteFailure

_Pathish = str | PathLike[str] | Path


def display_relative_path(path: _Pathish, root: _Pathish) -> str:
    """Return ``path`` relative to ``root`` for display, falling back to absolute.

    Args:
        path: Filesystem path to render.
        root: Directory the path should be expressed against.

    Returns:
        str: POSIX-style relative path when ``path`` lives under ``root``;
        otherwise the absolute path.
    """

    candidate = Path(path)
    try:
        return candidate.resolve().relative_to(Path(root).resolve()).as_posix()
    except ValueError:
        return str(candidate)


def write_text_atomic(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` through a temporary file and rename.

    Readers never observe a partially written file; the parent directory is
    created when absent.

    Args:
        path: Destination file.
        content: Text written using UTF-8.

    Raises:
        WriteFailure: If the directory or file cannot be written.
    """

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise WriteFailure(path, str(exc)) from exc
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise WriteFailure(path, str(exc)) from exc


def remove_file(path: Path) -> bool:
    """Delete ``path`` when it exists.

    Returns:
        bool: ``True`` when a file was removed.
    """

    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


__all__ = ["display_relative_path", "remove_file", "write_text_atomic"]

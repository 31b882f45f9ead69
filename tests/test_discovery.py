# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for component discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from prerender.discovery import ComponentDiscovery
from prerender.errors import SourceNotFoundError


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<div></div>", encoding="utf-8")
    return path


def test_discovers_sorted_matching_sources(tmp_path: Path) -> None:
    components = tmp_path / "components"
    header = _touch(components / "Header.astro")
    footer = _touch(components / "nested" / "Footer.astro")
    _touch(components / "notes.md")
    _touch(components / ".hidden" / "Secret.astro")
    _touch(components / "node_modules" / "Vendor.astro")

    discovery = ComponentDiscovery(tmp_path, extensions=[".astro"])

    assert discovery.discover(components) == sorted([header.resolve(), footer.resolve()])


def test_exclude_matches_relative_substrings(tmp_path: Path) -> None:
    components = tmp_path / "components"
    keep = _touch(components / "Card.astro")
    _touch(components / "drafts" / "Card.astro")

    discovery = ComponentDiscovery(tmp_path, extensions=[".astro"], exclude=["drafts/"])

    assert discovery.discover(components) == [keep.resolve()]
    assert not discovery.matches(components / "drafts" / "Card.astro")


def test_missing_root_raises(tmp_path: Path) -> None:
    discovery = ComponentDiscovery(tmp_path, extensions=[".astro"])

    with pytest.raises(SourceNotFoundError):
        discovery.discover(tmp_path / "absent")

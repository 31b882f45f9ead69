# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the persisted content cache."""

from __future__ import annotations

import json
from pathlib import Path

from prerender.cache import ContentCache
from prerender.models import content_hash


def test_is_cached_requires_exact_hash(tmp_path: Path) -> None:
    cache = ContentCache(tmp_path / "cache.json")
    cache.load()
    cache.set("src/Footer.astro", "abc")

    assert cache.is_cached("src/Footer.astro", "abc")
    assert not cache.is_cached("src/Footer.astro", "abd")
    assert not cache.is_cached("src/Header.astro", "abc")


def test_missing_store_loads_empty(tmp_path: Path) -> None:
    cache = ContentCache(tmp_path / "missing" / "cache.json")
    cache.load()

    assert cache.loaded
    assert len(cache) == 0


def test_corrupt_store_loads_empty(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    cache = ContentCache(path)
    cache.load()

    assert len(cache) == 0


def test_save_round_trips(tmp_path: Path) -> None:
    path = tmp_path / ".cache" / "prerender-cache.json"
    cache = ContentCache(path)
    cache.load()
    cache.set("b.astro", "2")
    cache.set("a.astro", "1")
    cache.save()

    reloaded = ContentCache(path)
    reloaded.load()
    assert dict((key, reloaded.get(key)) for key in reloaded) == {"a.astro": "1", "b.astro": "2"}

    before = path.read_text(encoding="utf-8")
    reloaded.save()
    assert path.read_text(encoding="utf-8") == before
    assert json.loads(before) == {"a.astro": "1", "b.astro": "2"}


def test_load_is_noop_once_loaded(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text(json.dumps({"a.astro": "1"}), encoding="utf-8")
    cache = ContentCache(path)
    cache.load()
    cache.set("a.astro", "2")
    cache.load()

    assert cache.get("a.astro") == "2"


def test_delete_is_idempotent(tmp_path: Path) -> None:
    cache = ContentCache(tmp_path / "cache.json")
    cache.load()
    cache.set("a.astro", "1")
    cache.delete("a.astro")
    cache.delete("a.astro")

    assert "a.astro" not in cache


def test_content_hash_detects_single_byte_change() -> None:
    original = b"<p>{year}</p>"
    assert content_hash(original) == content_hash(bytes(original))
    assert content_hash(original) != content_hash(b"<p>{yeas}</p>")

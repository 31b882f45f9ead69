# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the prerender command line interface."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from typer.testing import CliRunner

from prerender.cli.app import app

WriteComponent = Callable[[str, str], Path]


def test_build_renders_components(project: Path, write_component: WriteComponent) -> None:
    write_component("Footer", '---\nyear = "2024"\n---\n<p class="text-center">{year}</p>')

    result = CliRunner().invoke(app, ["build", "--root", str(project), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert (project / "public" / "prerendered" / "Footer.html").read_text(encoding="utf-8") == (
        '<p class="text-center">2024</p>'
    )
    assert (project / "public" / "prerendered" / "lazy-components.css").is_file()


def test_build_exits_non_zero_when_a_component_fails(project: Path, write_component: WriteComponent) -> None:
    write_component("Broken", "---\nconst a = 'b';\n<p></p>")

    result = CliRunner().invoke(app, ["build", "--root", str(project), "--no-emoji", "--no-cache"])

    assert result.exit_code == 1
    assert "Broken.astro" in result.output


def test_build_missing_components_dir_exits_with_error(tmp_path: Path) -> None:
    result = CliRunner().invoke(app, ["build", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 2


def test_build_honours_no_minify(project: Path, write_component: WriteComponent) -> None:
    write_component("Card", "<div>\n  <p>x</p>\n</div>\n")

    result = CliRunner().invoke(app, ["build", "--root", str(project), "--no-minify", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert (project / "public" / "prerendered" / "Card.html").read_text(encoding="utf-8") == "<div>\n  <p>x</p>\n</div>"


def test_clear_cache_removes_cache_file(project: Path, write_component: WriteComponent) -> None:
    write_component("Footer", "<p>x</p>")
    runner = CliRunner()
    runner.invoke(app, ["build", "--root", str(project), "--no-emoji"])
    cache_file = project / ".cache" / "prerender-cache.json"
    assert cache_file.is_file()

    result = runner.invoke(app, ["clear-cache", "--root", str(project), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert not cache_file.exists()

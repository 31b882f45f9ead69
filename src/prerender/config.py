# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the prerender pipeline."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
CONFIG_FILENAME: Final[str] = "prerender.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "prerender"
DEFAULT_BREAKPOINTS: Final[dict[str, str]] = {
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
    "2xl": "1536px",
}


class RendererKind(str, Enum):
    """Enumerate the rendering strategies a pipeline can be configured with."""

    STRUCTURAL = "structural"
    FULL = "full"


class UtilityCSSConfig(BaseModel):
    """Settings handed to the utility CSS compiler."""

    model_config = ConfigDict(validate_assignment=True)

    compiler: Literal["rules", "tailwind"] = "rules"
    config_path: Path | None = None
    executable: str = "tailwindcss"
    rules: dict[str, str] = Field(default_factory=dict)
    base_css: str = ""
    breakpoints: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_BREAKPOINTS))


class PrerenderConfig(BaseModel):
    """Primary configuration container used by the orchestrator."""

    model_config = ConfigDict(validate_assignment=True)

    components_dir: Path = Path("src/components/lazy")
    output_dir: Path = Path("public/prerendered")
    exclude: list[str] = Field(default_factory=list)
    renderer: RendererKind = RendererKind.STRUCTURAL
    minify: bool = True
    generate_utility_css: bool = True
    cache: bool = True
    cache_dir: Path = Path(".cache")
    extensions: list[str] = Field(default_factory=lambda: [".astro"])
    stylesheet_name: str = "lazy-components.css"
    css_modules: bool = False
    name: str = "prerender"
    utility: UtilityCSSConfig = Field(default_factory=UtilityCSSConfig)

    @field_validator("extensions")
    @classmethod
    def _normalise_extensions(cls, value: list[str]) -> list[str]:
        """Ensure every extension carries a leading dot."""

        return [entry if entry.startswith(".") else f".{entry}" for entry in value if entry]

    def cache_file(self, root: Path) -> Path:
        """Return the persisted content cache location for ``root``."""

        return _resolve(root, self.cache_dir) / f"{self.name}-cache.json"

    def components_path(self, root: Path) -> Path:
        """Return the absolute components directory for ``root``."""

        return _resolve(root, self.components_dir)

    def output_path(self, root: Path) -> Path:
        """Return the absolute artifact directory for ``root``."""

        return _resolve(root, self.output_dir)


def _resolve(root: Path, candidate: Path) -> Path:
    return candidate if candidate.is_absolute() else (root / candidate)


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``payload`` with kebab-case keys converted to snake_case.

    ``utility.rules`` keys are class names and are left untouched.
    """

    normalised: dict[str, Any] = {}
    for key, value in payload.items():
        name = key.replace("-", "_")
        if isinstance(value, Mapping) and name != "rules":
            value = _normalise_keys(value)
        normalised[name] = value
    return normalised


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def load_pyproject_section(root: Path) -> dict[str, Any]:
    """Return the ``[tool.prerender]`` table from ``pyproject.toml`` under ``root``."""

    path = root / PYPROJECT_FILENAME
    if not path.is_file():
        return {}
    tool_section = _read_toml(path).get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if not isinstance(section, Mapping):
        return {}
    return _normalise_keys(section)


def load_config_file(root: Path) -> dict[str, Any]:
    """Return the contents of ``prerender.toml`` under ``root`` when present."""

    path = root / CONFIG_FILENAME
    if not path.is_file():
        return {}
    return _normalise_keys(_read_toml(path))


def load_config(root: Path, overrides: Mapping[str, Any] | None = None) -> PrerenderConfig:
    """Build the effective configuration for the project at ``root``.

    Sources are merged in order: built-in defaults, ``[tool.prerender]`` in
    ``pyproject.toml``, ``prerender.toml`` and finally ``overrides``.

    Args:
        root: Project root directory.
        overrides: Explicit values (typically CLI flags) applied last.

    Returns:
        PrerenderConfig: Validated configuration.

    Raises:
        ConfigError: If a source is malformed or validation fails.
    """

    merged: dict[str, Any] = {}
    for fragment in (load_pyproject_section(root), load_config_file(root)):
        merged = _deep_merge(merged, fragment)
    if overrides:
        merged = _deep_merge(merged, _normalise_keys(overrides))
    try:
        return PrerenderConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PrerenderConfig",
    "RendererKind",
    "UtilityCSSConfig",
    "load_config",
]

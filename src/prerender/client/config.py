# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Settings for the client runtime loader."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .stats import LoadRecord

DEFAULT_BASE_URL: Final[str] = "/prerendered"
DEFAULT_ROOT_MARGIN: Final[str] = "100px"
DEFAULT_RESOURCE_WINDOW: Final[float] = 6.0

LoadCallback = Callable[[str, "LoadRecord"], None]
ErrorCallback = Callable[[str, Exception], None]
CSSLoadCallback = Callable[[str, float], None]


@dataclass(slots=True)
class LoaderConfig:
    """Options controlling how fragments and stylesheets are fetched.

    Attributes:
        base_url: URL prefix fragments are served from.
        css_modules: Load ``base.css`` plus per-component stylesheets
            listed in the manifest instead of one shared stylesheet.
        manifest_url: Location of the per-component stylesheet manifest.
        base_css_url: Shared utility stylesheet used in CSS-modules mode.
        legacy_css_url: Single combined stylesheet used otherwise.
        preload_css: Also emit ``rel="preload"`` hints for stylesheets.
        cache_html: Keep fetched fragments in memory.
        enable_retry: Retry transient failures.
        max_retries: Total attempts per fetch when retrying is enabled.
        retry_delay: Base delay in seconds; attempt ``n`` waits ``n`` times it.
        resource_window: Seconds secondary resources are observed after a load.
        root_margin: Margin handed to the viewport capability.
        debug: Emit debug log records.
        on_load: Called after every successful load.
        on_error: Called with every load or injection failure.
        on_css_load: Called with the URL and duration (ms) of each stylesheet.
    """

    base_url: str = DEFAULT_BASE_URL
    css_modules: bool = False
    manifest_url: str | None = None
    base_css_url: str | None = None
    legacy_css_url: str | None = None
    preload_css: bool = False
    cache_html: bool = True
    enable_retry: bool = True
    max_retries: int = 3
    retry_delay: float = 1.0
    resource_window: float = DEFAULT_RESOURCE_WINDOW
    root_margin: str = DEFAULT_ROOT_MARGIN
    debug: bool = False
    on_load: LoadCallback | None = None
    on_error: ErrorCallback | None = None
    on_css_load: CSSLoadCallback | None = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.manifest_url is None:
            self.manifest_url = f"{self.base_url}/manifest.json"
        if self.base_css_url is None:
            self.base_css_url = f"{self.base_url}/base.css"
        if self.legacy_css_url is None:
            self.legacy_css_url = f"{self.base_url}/lazy-components.css"
        if self.max_retries < 1:
            self.max_retries = 1

    def fragment_url(self, name: str) -> str:
        """Return the fragment URL for component ``name``."""

        return f"{self.base_url}/{name}.html"

    def asset_url(self, relative: str) -> str:
        """Return the URL of a manifest entry."""

        return f"{self.base_url}/{relative.lstrip('/')}"


__all__ = [
    "CSSLoadCallback",
    "ErrorCallback",
    "LoadCallback",
    "LoaderConfig",
]

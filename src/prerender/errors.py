# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the build pipeline and the client runtime."""

from __future__ import annotations

from pathlib import Path


class PrerenderError(Exception):
    """Base class for every error raised by the prerender package."""


class ConfigError(PrerenderError):
    """Raised when configuration input is invalid."""


class SourceNotFoundError(PrerenderError):
    """Raised when a required source root does not exist."""

    def __init__(self, path: Path) -> None:
        """Record the missing ``path`` in the error message.

        Args:
            path: Directory that was expected to exist.
        """

        super().__init__(f"Components directory not found: {path}")
        self.path = path


class RenderFailure(PrerenderError):
    """Raised when a single component cannot be rendered."""


class ComponentParseError(RenderFailure):
    """Raised when component source cannot be parsed into a tree."""


class ComponentResolutionError(RenderFailure):
    """Raised when a nested component reference cannot be resolved."""


class ModuleLoadError(PrerenderError):
    """Raised when a module context cannot load a component module."""


class ExtractionFailure(RenderFailure):
    """Raised when rendered markup cannot be scanned for styles or classes."""


class WriteFailure(PrerenderError):
    """Raised when an output artifact cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        """Describe the failed write for ``path``.

        Args:
            path: Destination that could not be written.
            reason: Underlying operating system error text.
        """

        super().__init__(f"Unable to write {path}: {reason}")
        self.path = path


class UtilityCompilerError(PrerenderError):
    """Raised when the utility CSS compiler fails."""


class NetworkFailure(PrerenderError):
    """Raised by the client runtime when a fetch fails after all retries."""

    def __init__(self, url: str, message: str, *, status_code: int | None = None) -> None:
        """Capture the failing ``url`` and optional HTTP status.

        Args:
            url: Resource that could not be fetched.
            message: Human readable failure description.
            status_code: HTTP status returned by the server, when any.
        """

        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FragmentNotFoundError(NetworkFailure):
    """Raised when the server answers 404; never retried."""


class ManifestFailure(NetworkFailure):
    """Raised when the per-component stylesheet manifest cannot be loaded."""


class StylesheetLoadError(NetworkFailure):
    """Raised when a stylesheet cannot be fetched."""


class TargetNotFoundError(PrerenderError):
    """Raised when an injection selector matches no element."""

    def __init__(self, selector: str) -> None:
        """Record the unmatched ``selector``.

        Args:
            selector: CSS selector supplied by the caller.
        """

        super().__init__(f"Target element not found: {selector}")
        self.selector = selector


__all__ = [
    "ComponentParseError",
    "ComponentResolutionError",
    "ConfigError",
    "ExtractionFailure",
    "FragmentNotFoundError",
    "ManifestFailure",
    "ModuleLoadError",
    "NetworkFailure",
    "PrerenderError",
    "RenderFailure",
    "SourceNotFoundError",
    "StylesheetLoadError",
    "TargetNotFoundError",
    "UtilityCompilerError",
    "WriteFailure",
]

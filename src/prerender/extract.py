# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Style, class and cleanup passes over rendered HTML."""

from __future__ import annotations

import re
from typing import Final

from .errors import ExtractionFailure
from .models import RenderedFragment, StyleBlock

_STYLE_OPEN_RE: Final[re.Pattern[str]] = re.compile(r"<style\b", re.IGNORECASE)
_STYLE_BLOCK_RE: Final[re.Pattern[str]] = re.compile(r"<style\b[^>]*>(.*?)</style\s*>", re.IGNORECASE | re.DOTALL)
_SCRIPT_BLOCK_RE: Final[re.Pattern[str]] = re.compile(r"<script\b[^>]*>.*?</script\s*>\s*", re.IGNORECASE | re.DOTALL)
_STYLE_REMOVE_RE: Final[re.Pattern[str]] = re.compile(r"<style\b[^>]*>.*?</style\s*>\s*", re.IGNORECASE | re.DOTALL)
_CLASS_ATTR_RE: Final[re.Pattern[str]] = re.compile(
    r"""(?<![\w:-])class\s*=\s*(?:"(?P<double>[^"]*)"|'(?P<single>[^']*)')""",
    re.IGNORECASE,
)
_DEBUG_ATTR_RE: Final[re.Pattern[str]] = re.compile(
    r"""\s+data-astro-(?:source-[\w-]*|cid-[\w-]*)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]*))?""",
    re.IGNORECASE,
)
_PRESERVE_RE: Final[re.Pattern[str]] = re.compile(
    r"<(pre|textarea)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)
_BETWEEN_TAGS_RE: Final[re.Pattern[str]] = re.compile(r">\s+<")
_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")
_PRESERVE_TOKEN: Final[str] = "<\x00{index}\x00>"


def extract_styles(html: str) -> list[str]:
    """Return the bodies of ``<style>`` elements in document order.

    Raises:
        ExtractionFailure: If a ``<style>`` element is never closed.
    """

    if _STYLE_OPEN_RE.search(_STYLE_REMOVE_RE.sub("", html)):
        raise ExtractionFailure("Unterminated <style> element in rendered markup")
    return [match.group(1) for match in _STYLE_BLOCK_RE.finditer(html)]


def extract_fragment(name: str, html: str) -> RenderedFragment:
    """Pair rendered ``html`` with its component styles.

    Non-empty style bodies are stripped and joined into a single
    :class:`StyleBlock` owned by ``name``.

    Raises:
        ExtractionFailure: If the markup cannot be scanned for styles.
    """

    bodies = [css.strip() for css in extract_styles(html) if css.strip()]
    styles = (StyleBlock(owner=name, css="\n\n".join(bodies)),) if bodies else ()
    return RenderedFragment(name=name, html=html, styles=styles)


def extract_classes(html: str) -> set[str]:
    """Return the distinct class tokens used in ``class`` attributes."""

    classes: set[str] = set()
    for match in _CLASS_ATTR_RE.finditer(html):
        value = match.group("double")
        if value is None:
            value = match.group("single")
        classes.update(token for token in value.split() if token)
    return classes


def _clean_once(html: str) -> str:
    html = _SCRIPT_BLOCK_RE.sub("", html)
    html = _STYLE_REMOVE_RE.sub("", html)
    html = _DEBUG_ATTR_RE.sub("", html)
    return html.strip()


def clean_html(html: str) -> str:
    """Strip scripts, style elements and source-location debug attributes.

    Removal repeats until nothing changes, so ``clean_html`` is idempotent
    even when a removal splices together a new match.
    """

    current = _clean_once(html)
    while True:
        cleaned = _clean_once(current)
        if cleaned == current:
            return cleaned
        current = cleaned


def minify_html(html: str) -> str:
    """Collapse insignificant whitespace in ``html``.

    ``<pre>`` and ``<textarea>`` bodies are preserved verbatim; comments are
    kept so component placeholders survive.
    """

    preserved: list[str] = []

    def _stash(match: re.Match[str]) -> str:
        preserved.append(match.group(0))
        return _PRESERVE_TOKEN.format(index=len(preserved) - 1)

    collapsed = _PRESERVE_RE.sub(_stash, html)
    collapsed = _BETWEEN_TAGS_RE.sub("><", collapsed)
    collapsed = _WHITESPACE_RE.sub(" ", collapsed).strip()
    for index, block in enumerate(preserved):
        collapsed = collapsed.replace(_PRESERVE_TOKEN.format(index=index), block, 1)
    return collapsed


__all__ = ["clean_html", "extract_classes", "extract_fragment", "extract_styles", "minify_html"]

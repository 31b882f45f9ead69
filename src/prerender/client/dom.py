# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Document capability used for injection, with a BeautifulSoup backend."""

from __future__ import annotations

from typing import Any, Final, Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag

EMPTY_DOCUMENT: Final[str] = "<html><head></head><body></body></html>"
FRAGMENT_PARSER: Final[str] = "html.parser"


@runtime_checkable
class Document(Protocol):
    """Minimal DOM surface the loader writes through."""

    def query(self, selector: str) -> Any | None:
        """Return the first element matching ``selector`` or ``None``."""
        ...

    def set_inner_html(self, element: Any, html: str) -> None:
        """Replace the children of ``element`` with parsed ``html``."""
        ...

    def add_stylesheet(self, href: str, *, rel: str = "stylesheet") -> None:
        """Append a ``<link>`` for ``href`` to the document head."""
        ...


class SoupDocument:
    """Headless document backed by :class:`bs4.BeautifulSoup`."""

    def __init__(self, markup: str = EMPTY_DOCUMENT, *, parser: str = FRAGMENT_PARSER) -> None:
        self._soup = BeautifulSoup(markup, parser)

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    def query(self, selector: str) -> Tag | None:
        return self._soup.select_one(selector)

    def set_inner_html(self, element: Tag, html: str) -> None:
        element.clear()
        fragment = BeautifulSoup(html, FRAGMENT_PARSER)
        for child in list(fragment.contents):
            element.append(child.extract())

    def add_stylesheet(self, href: str, *, rel: str = "stylesheet") -> None:
        attrs = {"rel": rel, "href": href}
        if rel == "preload":
            attrs["as"] = "style"
        self._head().append(self._soup.new_tag("link", attrs=attrs))

    def stylesheets(self) -> list[str]:
        """Return the ``href`` of every stylesheet link, in document order."""

        hrefs: list[str] = []
        for link in self._soup.find_all("link"):
            rel = link.get("rel")
            rels = rel if isinstance(rel, list) else str(rel or "").split()
            if "stylesheet" in rels:
                hrefs.append(str(link.get("href", "")))
        return hrefs

    def _head(self) -> Tag:
        head = self._soup.head
        if head is not None:
            return head
        head = self._soup.new_tag("head")
        container = self._soup.html or self._soup
        container.insert(0, head)
        return head

    def __str__(self) -> str:
        return str(self._soup)


__all__ = ["Document", "SoupDocument"]

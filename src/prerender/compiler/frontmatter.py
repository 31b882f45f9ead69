# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Pattern-based helpers over component frontmatter and placeholders.

Only whole-line string-literal declarations are recognised. Anything else
(numbers, expressions, destructuring) is ignored and its placeholder is left
in the rendered output verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

from ..errors import ComponentParseError

_IDENTIFIER: Final[str] = r"[A-Za-z_$][\w$]*"

_FRONTMATTER_RE: Final[re.Pattern[str]] = re.compile(
    r"\A\s*^---[ \t]*\r?\n(?P<body>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
_VARIABLE_RE: Final[re.Pattern[str]] = re.compile(
    rf"""^[ \t]*(?:(?:const|let|var)[ \t]+)?(?P<name>{_IDENTIFIER})[ \t]*=[ \t]*"""
    r"""(?:"(?P<double>[^"\n]*)"|'(?P<single>[^'\n]*)')[ \t]*;?[ \t]*$""",
    re.MULTILINE,
)
_IMPORT_RE: Final[re.Pattern[str]] = re.compile(
    rf"""^[ \t]*import[ \t]+(?P<name>{_IDENTIFIER})[ \t]+from[ \t]+["'](?P<spec>[^"'\n]+)["'][ \t]*;?""",
    re.MULTILINE,
)
PLACEHOLDER_RE: Final[re.Pattern[str]] = re.compile(rf"\{{(?P<name>{_IDENTIFIER})\}}")
EXPRESSION_RE: Final[re.Pattern[str]] = re.compile(r"\A\{.*\}\Z", re.DOTALL)


def split_frontmatter(source: str) -> tuple[str | None, str]:
    """Split ``source`` into its frontmatter script and template.

    Args:
        source: Complete component source text.

    Returns:
        tuple[str | None, str]: Frontmatter body (``None`` when absent) and
        the remaining template text.

    Raises:
        ComponentParseError: If an opening fence is never closed.
    """

    match = _FRONTMATTER_RE.match(source)
    if match is None:
        if source.lstrip().startswith("---"):
            raise ComponentParseError("Unterminated frontmatter block")
        return None, source
    return match.group("body").rstrip("\r\n"), source[match.end() :]


def extract_variables(frontmatter: str | None) -> dict[str, str]:
    """Return the string-literal declarations found in ``frontmatter``."""

    if not frontmatter:
        return {}
    variables: dict[str, str] = {}
    for match in _VARIABLE_RE.finditer(frontmatter):
        value = match.group("double")
        if value is None:
            value = match.group("single")
        variables[match.group("name")] = value
    return variables


def extract_imports(frontmatter: str | None) -> dict[str, str]:
    """Return ``local name -> module specifier`` for default imports."""

    if not frontmatter:
        return {}
    return {match.group("name"): match.group("spec") for match in _IMPORT_RE.finditer(frontmatter)}


def substitute_placeholders(text: str, values: Mapping[str, str]) -> str:
    """Replace ``{name}`` occurrences with matching ``values`` entries.

    Unknown names are left untouched. Replacement happens in a single pass, so
    substituted values are never re-expanded.
    """

    if not values or "{" not in text:
        return text
    return PLACEHOLDER_RE.sub(lambda match: values.get(match.group("name"), match.group(0)), text)


def is_expression(value: str) -> bool:
    """Return whether an attribute value is a ``{...}`` expression."""

    return bool(EXPRESSION_RE.match(value))


__all__ = [
    "PLACEHOLDER_RE",
    "extract_imports",
    "extract_variables",
    "is_expression",
    "split_frontmatter",
    "substitute_placeholders",
]

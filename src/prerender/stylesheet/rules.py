# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in utility rule families understood by the rule-table compiler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class UtilityRule:
    """Declarations emitted for one utility class.

    Attributes:
        selector_suffix: Text appended after the class selector.
        declarations: ``property: value`` pairs without trailing semicolons.
    """

    selector_suffix: str
    declarations: tuple[str, ...]


SPACING_SCALE: Final[dict[str, str]] = {
    "0": "0rem",
    "0.5": "0.125rem",
    "1": "0.25rem",
    "1.5": "0.375rem",
    "2": "0.5rem",
    "2.5": "0.625rem",
    "3": "0.75rem",
    "4": "1rem",
    "5": "1.25rem",
    "6": "1.5rem",
    "8": "2rem",
    "10": "2.5rem",
    "12": "3rem",
    "16": "4rem",
    "20": "5rem",
    "24": "6rem",
    "32": "8rem",
}

FONT_SIZES: Final[dict[str, tuple[str, str]]] = {
    "xs": ("0.75rem", "1rem"),
    "sm": ("0.875rem", "1.25rem"),
    "base": ("1rem", "1.5rem"),
    "lg": ("1.125rem", "1.75rem"),
    "xl": ("1.25rem", "1.75rem"),
    "2xl": ("1.5rem", "2rem"),
    "3xl": ("1.875rem", "2.25rem"),
    "4xl": ("2.25rem", "2.5rem"),
}

FONT_WEIGHTS: Final[dict[str, str]] = {
    "thin": "100",
    "light": "300",
    "normal": "400",
    "medium": "500",
    "semibold": "600",
    "bold": "700",
    "extrabold": "800",
}

COLOR_PALETTE: Final[dict[str, dict[str, str]]] = {
    "gray": {
        "50": "#f9fafb",
        "100": "#f3f4f6",
        "200": "#e5e7eb",
        "300": "#d1d5db",
        "400": "#9ca3af",
        "500": "#6b7280",
        "600": "#4b5563",
        "700": "#374151",
        "800": "#1f2937",
        "900": "#111827",
    },
    "red": {
        "100": "#fee2e2",
        "200": "#fecaca",
        "300": "#fca5a5",
        "400": "#f87171",
        "500": "#ef4444",
        "600": "#dc2626",
        "700": "#b91c1c",
        "800": "#991b1b",
        "900": "#7f1d1d",
    },
    "green": {
        "100": "#dcfce7",
        "200": "#bbf7d0",
        "300": "#86efac",
        "400": "#4ade80",
        "500": "#22c55e",
        "600": "#16a34a",
        "700": "#15803d",
        "800": "#166534",
        "900": "#14532d",
    },
    "blue": {
        "100": "#dbeafe",
        "200": "#bfdbfe",
        "300": "#93c5fd",
        "400": "#60a5fa",
        "500": "#3b82f6",
        "600": "#2563eb",
        "700": "#1d4ed8",
        "800": "#1e40af",
        "900": "#1e3a8a",
    },
    "white": {"base": "#ffffff"},
    "black": {"base": "#000000"},
}

STATIC_RULES: Final[dict[str, tuple[str, ...]]] = {
    "block": ("display: block",),
    "inline-block": ("display: inline-block",),
    "inline": ("display: inline",),
    "flex": ("display: flex",),
    "inline-flex": ("display: inline-flex",),
    "grid": ("display: grid",),
    "hidden": ("display: none",),
    "flex-row": ("flex-direction: row",),
    "flex-col": ("flex-direction: column",),
    "flex-wrap": ("flex-wrap: wrap",),
    "flex-1": ("flex: 1 1 0%",),
    "items-start": ("align-items: flex-start",),
    "items-center": ("align-items: center",),
    "items-end": ("align-items: flex-end",),
    "justify-start": ("justify-content: flex-start",),
    "justify-center": ("justify-content: center",),
    "justify-end": ("justify-content: flex-end",),
    "justify-between": ("justify-content: space-between",),
    "text-left": ("text-align: left",),
    "text-center": ("text-align: center",),
    "text-right": ("text-align: right",),
    "italic": ("font-style: italic",),
    "underline": ("text-decoration-line: underline",),
    "uppercase": ("text-transform: uppercase",),
    "w-full": ("width: 100%",),
    "h-full": ("height: 100%",),
    "border": ("border-width: 1px",),
    "rounded": ("border-radius: 0.25rem",),
    "rounded-md": ("border-radius: 0.375rem",),
    "rounded-lg": ("border-radius: 0.5rem",),
    "rounded-full": ("border-radius: 9999px",),
    "shadow": ("box-shadow: 0 1px 3px 0 rgb(0 0 0 / 0.1), 0 1px 2px -1px rgb(0 0 0 / 0.1)",),
}

SPACING_PROPERTIES: Final[dict[str, tuple[str, ...]]] = {
    "p": ("padding",),
    "px": ("padding-left", "padding-right"),
    "py": ("padding-top", "padding-bottom"),
    "pt": ("padding-top",),
    "pb": ("padding-bottom",),
    "pl": ("padding-left",),
    "pr": ("padding-right",),
    "m": ("margin",),
    "mx": ("margin-left", "margin-right"),
    "my": ("margin-top", "margin-bottom"),
    "mt": ("margin-top",),
    "mb": ("margin-bottom",),
    "ml": ("margin-left",),
    "mr": ("margin-right",),
    "gap": ("gap",),
}

COLOR_PROPERTIES: Final[dict[str, str]] = {
    "text": "color",
    "bg": "background-color",
    "border": "border-color",
}


def escape_class(name: str) -> str:
    """Return ``name`` escaped for use in a CSS class selector."""

    escaped = []
    for index, char in enumerate(name):
        if char.isalnum() or char in "-_":
            if index == 0 and char.isdigit():
                escaped.append(f"\\3{char} ")
            else:
                escaped.append(char)
        else:
            escaped.append(f"\\{char}")
    return "".join(escaped)


def with_alpha(hex_value: str, alpha: float) -> str:
    """Convert a ``#rgb``/``#rrggbb`` colour to ``rgba`` with ``alpha``."""

    hex_value = hex_value.lstrip("#")
    if len(hex_value) == 3:
        hex_value = "".join(ch * 2 for ch in hex_value)
    red = int(hex_value[0:2], 16)
    green = int(hex_value[2:4], 16)
    blue = int(hex_value[4:6], 16)
    return f"rgba({red}, {green}, {blue}, {alpha:g})"


def _arbitrary(token: str) -> str | None:
    if token.startswith("[") and token.endswith("]") and len(token) > 2:
        return token[1:-1].replace("_", " ")
    return None


def resolve_color(token: str) -> str | None:
    """Return the CSS colour for a palette token such as ``blue-500/50``."""

    arbitrary = _arbitrary(token)
    if arbitrary is not None:
        return arbitrary
    if token in {"transparent", "current"}:
        return "currentColor" if token == "current" else token
    color_part, _, alpha_part = token.partition("/")
    name, _, shade = color_part.partition("-")
    palette = COLOR_PALETTE.get(name)
    if palette is None:
        return None
    base = palette.get(shade or "base")
    if base is None:
        return None
    if not alpha_part:
        return base
    try:
        return with_alpha(base, float(alpha_part) / 100)
    except ValueError:
        return None


def spacing_value(token: str) -> str | None:
    """Return the CSS length for a spacing scale token."""

    arbitrary = _arbitrary(token)
    if arbitrary is not None:
        return arbitrary
    if token == "px":
        return "1px"
    if token == "auto":
        return "auto"
    return SPACING_SCALE.get(token)


def _spacing_rule(prefix: str, token: str) -> UtilityRule | None:
    value = spacing_value(token)
    if value is None or (value == "auto" and prefix.startswith("p")):
        return None
    return UtilityRule("", tuple(f"{prop}: {value}" for prop in SPACING_PROPERTIES[prefix]))


def _text_rule(token: str) -> UtilityRule | None:
    size = FONT_SIZES.get(token)
    if size is not None:
        return UtilityRule("", (f"font-size: {size[0]}", f"line-height: {size[1]}"))
    color = resolve_color(token)
    if color is None:
        return None
    return UtilityRule("", (f"color: {color}",))


def _font_rule(token: str) -> UtilityRule | None:
    weight = FONT_WEIGHTS.get(token)
    return UtilityRule("", (f"font-weight: {weight}",)) if weight else None


def _color_rule(prefix: str, token: str) -> UtilityRule | None:
    color = resolve_color(token)
    if color is None:
        return None
    return UtilityRule("", (f"{COLOR_PROPERTIES[prefix]}: {color}",))


def _space_between_rule(axis: str, token: str) -> UtilityRule | None:
    value = spacing_value(token)
    if value is None or value == "auto":
        return None
    prop = "margin-left" if axis == "x" else "margin-top"
    return UtilityRule(" > * + *", (f"{prop}: {value}",))


_PREFIX_HANDLERS: Final[dict[str, Callable[[str], UtilityRule | None]]] = {
    "text": _text_rule,
    "font": _font_rule,
    "bg": lambda token: _color_rule("bg", token),
    "space-x": lambda token: _space_between_rule("x", token),
    "space-y": lambda token: _space_between_rule("y", token),
}


def builtin_rule(name: str) -> UtilityRule | None:
    """Return the built-in rule for a variant-free utility ``name``."""

    static = STATIC_RULES.get(name)
    if static is not None:
        return UtilityRule("", static)
    for prefix, handler in _PREFIX_HANDLERS.items():
        if name.startswith(f"{prefix}-"):
            rule = handler(name[len(prefix) + 1 :])
            if rule is not None:
                return rule
    prefix, _, token = name.partition("-")
    if prefix in SPACING_PROPERTIES and token:
        return _spacing_rule(prefix, token)
    if prefix == "border" and token:
        return _color_rule("border", token)
    return None


__all__ = [
    "COLOR_PALETTE",
    "UtilityRule",
    "builtin_rule",
    "escape_class",
    "resolve_color",
    "spacing_value",
    "with_alpha",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Utility CSS compilers restricted to an allowed set of class names."""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..config import UtilityCSSConfig
from ..errors import UtilityCompilerError
from ..process import run_command
from .rules import UtilityRule, builtin_rule, escape_class

PSEUDO_PREFIXES: Final[dict[str, str]] = {
    "hover": ":hover",
    "focus": ":focus",
    "focus-visible": ":focus-visible",
    "active": ":active",
    "disabled": ":disabled",
    "first": ":first-child",
    "last": ":last-child",
}

TAILWIND_INPUT: Final[str] = "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n"


@runtime_checkable
class UtilityCompiler(Protocol):
    """Turn a set of observed class names into utility CSS rules."""

    def compile(self, config: UtilityCSSConfig, allowed: Iterable[str]) -> str:
        """Return CSS for ``allowed`` only.

        Args:
            config: Base rule definitions and compiler settings.
            allowed: Class tokens observed in rendered markup.

        Returns:
            str: CSS text. Classes without a known rule emit nothing.

        Raises:
            UtilityCompilerError: If the compiler cannot produce output.
        """
        ...


def _parse_declarations(text: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in text.split(";") if part.strip())


def _format_rule(selector: str, declarations: Sequence[str], indent: str = "") -> str:
    body = "".join(f"{indent}  {declaration};\n" for declaration in declarations)
    return f"{indent}{selector} {{\n{body}{indent}}}"


class RuleTableCompiler:
    """Resolve utility classes against a rule table without external tools.

    Custom rules from ``UtilityCSSConfig.rules`` take precedence over the
    built-in families. Output is sorted by class name so it depends only on
    the set of allowed classes.
    """

    def compile(self, config: UtilityCSSConfig, allowed: Iterable[str]) -> str:
        custom = {name: _parse_declarations(text) for name, text in config.rules.items()}
        plain: list[str] = []
        responsive: dict[str, list[str]] = {name: [] for name in config.breakpoints}

        for class_name in sorted(set(allowed)):
            parsed = self._split_variants(class_name, config.breakpoints)
            if parsed is None:
                continue
            breakpoint, pseudo, base = parsed
            rule = self._resolve(base, custom)
            if rule is None:
                continue
            selector = f".{escape_class(class_name)}{pseudo}{rule.selector_suffix}"
            if breakpoint is None:
                plain.append(_format_rule(selector, rule.declarations))
            else:
                responsive[breakpoint].append(_format_rule(selector, rule.declarations, "  "))

        sections: list[str] = []
        if config.base_css.strip():
            sections.append(config.base_css.strip())
        sections.extend(plain)
        for name, width in config.breakpoints.items():
            rules = responsive[name]
            if rules:
                inner = "\n".join(rules)
                sections.append(f"@media (min-width: {width}) {{\n{inner}\n}}")
        return "\n".join(sections) + "\n" if sections else ""

    @staticmethod
    def _split_variants(
        class_name: str,
        breakpoints: dict[str, str],
    ) -> tuple[str | None, str, str] | None:
        *variants, base = class_name.split(":")
        breakpoint: str | None = None
        pseudo = ""
        for variant in variants:
            if variant in breakpoints and breakpoint is None and not pseudo:
                breakpoint = variant
            elif variant in PSEUDO_PREFIXES:
                pseudo += PSEUDO_PREFIXES[variant]
            else:
                return None
        if not base:
            return None
        return breakpoint, pseudo, base

    @staticmethod
    def _resolve(base: str, custom: dict[str, tuple[str, ...]]) -> UtilityRule | None:
        declarations = custom.get(base)
        if declarations:
            return UtilityRule("", declarations)
        return builtin_rule(base)


class TailwindCLICompiler:
    """Compile utility CSS with the ``tailwindcss`` executable.

    The generated content file lists only the allowed classes, so Tailwind's
    own content scanning produces exactly the tree-shaken rule set.
    """

    def __init__(
        self,
        *,
        cwd: Path | None = None,
        runner: Callable[..., subprocess.CompletedProcess[str]] = run_command,
    ) -> None:
        self._cwd = cwd
        self._runner = runner

    def compile(self, config: UtilityCSSConfig, allowed: Iterable[str]) -> str:
        classes = sorted(set(allowed))
        with tempfile.TemporaryDirectory(prefix="prerender-tailwind-") as tmp:
            workdir = Path(tmp)
            content_file = workdir / "content.html"
            input_file = workdir / "input.css"
            output_file = workdir / "output.css"
            content_file.write_text(
                "".join(f'<div class="{name}"></div>\n' for name in classes),
                encoding="utf-8",
            )
            input_file.write_text(TAILWIND_INPUT, encoding="utf-8")
            args = [
                config.executable,
                "--input",
                str(input_file),
                "--output",
                str(output_file),
                "--content",
                str(content_file),
            ]
            if config.config_path is not None:
                config_path = config.config_path
                if not config_path.is_absolute() and self._cwd is not None:
                    config_path = self._cwd / config_path
                args.extend(["--config", str(config_path)])
            try:
                self._runner(args, cwd=self._cwd)
                css = output_file.read_text(encoding="utf-8")
            except subprocess.CalledProcessError as exc:
                detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
                raise UtilityCompilerError(f"{config.executable} failed: {detail}") from exc
            except OSError as exc:
                raise UtilityCompilerError(f"{config.executable} failed: {exc}") from exc
        base = config.base_css.strip()
        return f"{base}\n{css}" if base else css


def build_compiler(config: UtilityCSSConfig, *, root: Path | None = None) -> UtilityCompiler:
    """Return the utility compiler selected by ``config.compiler``."""

    if config.compiler == "tailwind":
        return TailwindCLICompiler(cwd=root)
    return RuleTableCompiler()


__all__ = [
    "PSEUDO_PREFIXES",
    "RuleTableCompiler",
    "TailwindCLICompiler",
    "UtilityCompiler",
    "build_compiler",
]

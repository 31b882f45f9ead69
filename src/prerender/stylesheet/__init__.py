# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Utility CSS compilation and stylesheet generation."""

from __future__ import annotations

from .compilers import RuleTableCompiler, TailwindCLICompiler, UtilityCompiler, build_compiler
from .generator import StylesheetGenerator, ledger_path, read_ledger, write_ledger
from .rules import UtilityRule, escape_class

__all__ = [
    "RuleTableCompiler",
    "StylesheetGenerator",
    "TailwindCLICompiler",
    "UtilityCompiler",
    "UtilityRule",
    "build_compiler",
    "escape_class",
    "ledger_path",
    "read_ledger",
    "write_ledger",
]

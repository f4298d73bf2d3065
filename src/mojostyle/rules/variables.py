"""
Variable declaration rules.

Mojo has a single `var` declaration form; `let` was removed. The `inout`
argument convention was renamed `mut`.
"""

from __future__ import annotations

from typing import Optional

from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from .base import SourceContext
from .patterns import RE_INOUT_ARG, RE_LET_BINDING


def check_variables(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check for legacy binding keywords and argument conventions."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []

    for i, line, code in ctx.checked():
        if RE_LET_BINDING.match(code):
            findings.append(ctx.violation(
                i, Category.VARIABLE_DECLARATION, Severity.ERROR,
                "Legacy immutable 'let' binding",
                "Declare the variable with 'var'",
            ))

        if RE_INOUT_ARG.search(code):
            findings.append(ctx.violation(
                i, Category.VARIABLE_DECLARATION, Severity.WARNING,
                "Legacy 'inout' argument convention",
                "Use the 'mut' argument convention",
            ))

    return findings

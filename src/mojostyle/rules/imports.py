"""
Import organization rules.

- relative imports (`from .x import y`) are errors
- standard-library imports must come before project-local imports
- deprecated platform-detection names must not be imported
"""

from __future__ import annotations

from typing import Optional

from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from .base import SourceContext
from .patterns import (
    DEPRECATED_PLATFORM_NAMES,
    PLATFORM_MODULES,
    RE_FROM_IMPORT,
    RE_PLAIN_IMPORT,
    STDLIB_MODULES,
)


def _imported_names(ctx: SourceContext, index: int, names_text: str) -> list[tuple[int, str]]:
    """
    (line index, name) pairs for a from-import's name list.

    Follows a parenthesised list across lines.
    """
    pairs: list[tuple[int, str]] = []
    text = names_text
    k = index
    parenthesised = text.lstrip().startswith("(")

    while True:
        for part in text.replace("(", " ").replace(")", " ").split(","):
            name = part.strip().split(" as ")[0].strip()
            if name:
                pairs.append((k, name))
        if not parenthesised or ")" in text:
            break
        k += 1
        if k >= len(ctx.lines):
            break
        text = ctx.lines[k]
    return pairs


def check_imports(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check import organization."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []
    first_local: Optional[tuple[int, str]] = None

    for i, line, code in ctx.checked():
        m_from = RE_FROM_IMPORT.match(code)
        m_plain = None if m_from else RE_PLAIN_IMPORT.match(code)
        if not m_from and not m_plain:
            continue

        if m_from:
            dots, module, names_text = m_from.group(1), m_from.group(2), m_from.group(3)
        else:
            dots, module, names_text = "", m_plain.group(1), ""

        if dots:
            findings.append(ctx.violation(
                i, Category.IMPORT_PATTERN, Severity.ERROR,
                f"Relative import '{line.strip()}'",
                "Use an absolute import rooted at the package name",
            ))

        root = module.split(".", 1)[0]
        is_stdlib = not dots and root in STDLIB_MODULES

        if is_stdlib and first_local is not None:
            local_line, local_module = first_local
            findings.append(ctx.violation(
                i, Category.IMPORT_PATTERN, Severity.WARNING,
                f"Standard library import '{module}' follows project import "
                f"'{local_module}' (line {local_line + 1})",
                "Group standard library imports before project-local imports",
            ))
        elif not is_stdlib and first_local is None:
            first_local = (i, dots + module)

        if m_from and module in PLATFORM_MODULES:
            for k, name in _imported_names(ctx, i, names_text):
                replacement = DEPRECATED_PLATFORM_NAMES.get(name)
                if replacement is None or ctx.is_excluded(k):
                    continue
                findings.append(ctx.violation(
                    k, Category.IMPORT_PATTERN, Severity.ERROR,
                    f"Deprecated platform detection '{name}' imported from {module}",
                    f"Use {replacement} instead",
                ))

    return findings

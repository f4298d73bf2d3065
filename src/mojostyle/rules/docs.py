"""
Documentation rules.

A docstring must be the first statement of every struct, trait and
function. Present docstrings are graded by analysis/docstrings.py.
Violations are reported on the declaration line.
"""

from __future__ import annotations

from typing import Optional

from ..analysis.docstrings import DocstringQuality, assess_docstring
from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.structure import extract_block, find_declarations, first_statement, is_docstring_start
from .base import SourceContext

_QUALITY_SEVERITY = {
    DocstringQuality.TOO_BRIEF: Severity.WARNING,
    DocstringQuality.MISSING_DESCRIPTION: Severity.WARNING,
    DocstringQuality.MISSING_SECTIONS: Severity.SUGGESTION,
}

_QUALITY_REMEDY = {
    DocstringQuality.TOO_BRIEF: "Expand the docstring into a full sentence describing the behavior",
    DocstringQuality.MISSING_DESCRIPTION: "Start the docstring with a summary of what it does",
    DocstringQuality.MISSING_SECTIONS: "Add Args: and Returns: sections",
}


def check_docs(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check docstring presence and quality."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []

    for decl in find_declarations(ctx.lines, ctx.classifier):
        block = extract_block(ctx.lines, decl.line)
        if block is None or block.is_empty:
            continue

        first = first_statement(ctx.lines, block)
        if first is None:
            continue

        if not is_docstring_start(ctx.lines[first]):
            severity = Severity.ERROR if decl.is_type else Severity.WARNING
            findings.append(ctx.violation(
                decl.line, Category.DOCUMENTATION, severity,
                f"Missing docstring for {decl.kind} '{decl.name}'",
                f'Add a """docstring""" as the first statement of {decl.name}',
            ))
            continue

        assessment = assess_docstring(ctx.lines, first, ctx.config.min_docstring_length)
        if assessment.acceptable:
            continue

        findings.append(ctx.violation(
            decl.line, Category.DOCUMENTATION, _QUALITY_SEVERITY[assessment.quality],
            f"Docstring for {decl.kind} '{decl.name}' is {assessment.quality.value}",
            _QUALITY_REMEDY[assessment.quality],
        ))

    return findings

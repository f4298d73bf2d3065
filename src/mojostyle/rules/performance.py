"""
Performance anti-pattern rules.

- Python.import_module() inside a loop re-imports on every iteration
- List.append() in a loop on a list that is never reserve()d
- loops nested three or more deep (observation)
"""

from __future__ import annotations

import re
from typing import Optional

from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.lexer import opens_block
from ..parser.structure import loop_depths
from .base import SourceContext
from .patterns import DEEP_LOOP_NESTING, RE_APPEND_CALL, RE_LOOP_HEADER, RE_PYTHON_IMPORT_MODULE


def check_performance(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check for common performance anti-patterns."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []
    depths = loop_depths(ctx.lines, ctx.classifier)

    checked = list(ctx.checked())
    all_code = "\n".join(code for _, _, code in checked)
    reported_receivers: set[str] = set()

    for i, line, code in checked:
        in_loop = depths[i] > 0

        if in_loop and RE_PYTHON_IMPORT_MODULE.search(code):
            findings.append(ctx.violation(
                i, Category.PERFORMANCE, Severity.WARNING,
                "Python.import_module() called inside a loop",
                "Import the Python module once, before the loop",
            ))

        if in_loop:
            for m in RE_APPEND_CALL.finditer(code):
                receiver = m.group(1)
                if receiver in reported_receivers:
                    continue
                if re.search(rf"\b{re.escape(receiver)}\.reserve\s*\(", all_code):
                    continue
                reported_receivers.add(receiver)
                findings.append(ctx.violation(
                    i, Category.PERFORMANCE, Severity.SUGGESTION,
                    f"'{receiver}.append()' in a loop without reserving capacity",
                    f"Call {receiver}.reserve(n) before the loop when the size is known",
                ))

        if depths[i] >= DEEP_LOOP_NESTING - 1 and RE_LOOP_HEADER.match(code) and opens_block(line):
            findings.append(ctx.violation(
                i, Category.PERFORMANCE, Severity.OBSERVATION,
                f"Loop nested {depths[i] + 1} levels deep",
                "Consider vectorize/parallelize from the algorithm module or restructuring the loops",
            ))

    return findings

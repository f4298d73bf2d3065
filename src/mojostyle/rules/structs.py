"""
Struct declaration rules.

- trivial __copyinit__ / __moveinit__ vs declared traits (analysis/traits.py)
- retired @value decorator
- struct names in UpperCamelCase
"""

from __future__ import annotations

from typing import Optional

from ..analysis.lifecycle import analyze_lifecycle, parse_struct_info
from ..analysis.traits import suggest_trait_changes
from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.structure import extract_block, find_declarations
from .base import SourceContext
from .patterns import RE_TYPE_NAME, RETIRED_DECORATORS


def check_structs(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check struct declarations."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []

    for decl in find_declarations(ctx.lines, ctx.classifier, kinds={"struct"}):
        if not RE_TYPE_NAME.match(decl.name):
            findings.append(ctx.violation(
                decl.line, Category.STRUCT_PATTERN, Severity.WARNING,
                f"Struct name '{decl.name}' is not UpperCamelCase",
                "Rename the struct using UpperCamelCase",
            ))

        for decorator in decl.decorators:
            if decorator in RETIRED_DECORATORS:
                findings.append(ctx.violation(
                    decl.line, Category.STRUCT_PATTERN, Severity.WARNING,
                    f"Struct '{decl.name}' uses the retired @{decorator} decorator",
                    RETIRED_DECORATORS[decorator],
                ))

        block = extract_block(ctx.lines, decl.line)
        if block is None or block.is_empty:
            continue

        # Computed independently, combined only by the trait engine
        info = parse_struct_info(ctx.lines, block)
        analysis = analyze_lifecycle(ctx.lines, block)

        for suggestion in suggest_trait_changes(info, analysis):
            index = block.body_start + (suggestion.method_offset or 0)
            if ctx.is_excluded(index):
                continue
            findings.append(ctx.violation(
                index, Category.STRUCT_PATTERN, Severity.SUGGESTION,
                suggestion.message,
                suggestion.remedy,
            ))

    return findings

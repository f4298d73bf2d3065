"""
Pointer ownership rules.

An `owned` UnsafePointer parameter hands the function responsibility for
the allocation. If nothing in the function body releases memory, the
pointer probably leaks. Kernel functions are skipped (device memory is
owned by the host-side buffer), and borrowed / mut pointers are never
flagged: the caller still owns them.

The release check is deliberately coarse: any free() in the body counts,
whether or not it is called on the parameter.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from ..analysis.lifecycle import parameter_list
from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.lexer import TokenType, code_tokens, mask_line
from ..parser.structure import Block, extract_block, find_declarations
from .base import SourceContext
from .patterns import (
    KERNEL_INDICATORS,
    OWNED_CONVENTION,
    POINTER_TYPES,
    RE_ALLOC_ASSIGN,
    RE_RELEASE_CALL,
)


def _is_kernel(body: Sequence[str]) -> bool:
    for line in body:
        for tok in code_tokens(line):
            if tok.type == TokenType.IDENTIFIER and tok.value in KERNEL_INDICATORS:
                return True
    return False


def _body_code(ctx: SourceContext, block: Block) -> list[tuple[int, str]]:
    """(index, masked code) for the checked lines of a function body."""
    return [
        (k, mask_line(ctx.lines[k]))
        for k in range(block.body_start, block.body_end)
        if not ctx.is_excluded(k)
    ]


def check_memory(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check pointer ownership heuristics."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []

    for decl in find_declarations(ctx.lines, ctx.classifier, kinds={"fn", "def"}):
        block = extract_block(ctx.lines, decl.line)
        if block is None or block.is_empty:
            continue

        body = _body_code(ctx, block)
        if _is_kernel([code for _, code in body]):
            continue

        if any(RE_RELEASE_CALL.search(code) for _, code in body):
            continue

        header = " ".join(mask_line(l).strip() for l in block.header_lines(ctx.lines))
        for conventions, name, type_text in parameter_list(header):
            if OWNED_CONVENTION not in conventions:
                continue
            if not any(p in type_text for p in POINTER_TYPES):
                continue
            findings.append(ctx.violation(
                decl.line, Category.MEMORY_SAFETY, Severity.WARNING,
                f"Owned pointer '{name}' is never freed in '{decl.name}' (possible leak)",
                f"Call {name}.free() when done, or take the pointer without 'owned'",
            ))

        for k, code in body:
            m = RE_ALLOC_ASSIGN.match(code)
            if not m:
                continue
            var = re.escape(m.group(1))
            escapes = any(
                re.search(rf"^\s*return\b.*\b{var}\b", other)
                or re.search(rf"\bself\.\w+\s*=\s*{var}\b", other)
                for _, other in body
            )
            if escapes:
                continue
            findings.append(ctx.violation(
                k, Category.MEMORY_SAFETY, Severity.OBSERVATION,
                f"'{m.group(1)}' is allocated in '{decl.name}' but never freed, returned or stored",
                f"Free '{m.group(1)}' before returning, or hand ownership to a struct",
            ))

    return findings

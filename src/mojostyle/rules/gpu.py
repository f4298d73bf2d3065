"""
GPU / accelerator pattern rules.

- retired DeviceContext method names
- kernel index usage (thread_idx, block_idx, ...) with no DeviceContext
  anywhere in the file
- simulation / placeholder labels in string literals, which usually mean
  the "GPU" path never ran on a device
"""

from __future__ import annotations

from typing import Optional

from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.lexer import TRIPLE_QUOTES, TokenType, code_tokens, tokenize_line
from .base import SourceContext
from .patterns import (
    DEVICE_CONTEXT_NAMES,
    KERNEL_INDICATORS,
    RE_DETECTION_LOGIC,
    RE_RETIRED_GPU_CALL,
    RE_SIMULATION_LABEL,
    RETIRED_GPU_METHODS,
)


def _label_in_literals(line: str) -> Optional[str]:
    """First simulation label in the line's string literals, docstrings skipped."""
    for tok in tokenize_line(line):
        if tok.type != TokenType.STRING or tok.value.startswith(TRIPLE_QUOTES):
            continue
        m = RE_SIMULATION_LABEL.search(tok.value)
        if m:
            return m.group(0)
    return None


def check_gpu(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check accelerator API usage."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []

    first_indicator: Optional[tuple[int, str]] = None
    has_device_context = False

    for i, line, code in ctx.checked():
        for m in RE_RETIRED_GPU_CALL.finditer(code):
            old = m.group(1)
            findings.append(ctx.violation(
                i, Category.GPU_PATTERN, Severity.ERROR,
                f"Retired accelerator method '{old}'",
                f"Use '{RETIRED_GPU_METHODS[old]}' instead",
            ))

        for tok in code_tokens(line):
            if tok.type != TokenType.IDENTIFIER:
                continue
            if tok.value in DEVICE_CONTEXT_NAMES:
                has_device_context = True
            elif tok.value in KERNEL_INDICATORS and first_indicator is None:
                first_indicator = (i, tok.value)

        label = _label_in_literals(line)
        if label and not RE_DETECTION_LOGIC.search(code):
            findings.append(ctx.violation(
                i, Category.GPU_PATTERN, Severity.WARNING,
                f"Simulation/placeholder label '{label}' in output",
                "Run the real accelerator path or remove the placeholder label",
            ))

    if first_indicator is not None and not has_device_context:
        index, name = first_indicator
        findings.append(ctx.violation(
            index, Category.GPU_PATTERN, Severity.ERROR,
            f"Kernel indicator '{name}' used but no DeviceContext is set up in this file",
            "Create a DeviceContext and launch the kernel with enqueue_function",
        ))

    return findings

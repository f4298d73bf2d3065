"""
Reporting and output formatting.

Handles:
- Summary block across all scanned files
- Per-file detail blocks
"""

from __future__ import annotations

from typing import Sequence

from . import __version__
from .models import ComplianceReport, Severity

_SEVERITY_ORDER = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.SUGGESTION: 2,
    Severity.OBSERVATION: 3,
}


def average_score(reports: Sequence[ComplianceReport]) -> float:
    if not reports:
        return 100.0
    return sum(r.score for r in reports) / len(reports)


def render_summary(reports: Sequence[ComplianceReport]) -> str:
    """Render the summary block."""
    total = sum(len(r.violations) for r in reports)
    lines = [
        f"mojostyle v{__version__} compliance summary",
        "=" * 44,
        f"Files scanned:  {len(reports)}",
        f"Violations:     {total}",
        f"  Errors:       {sum(r.error_count for r in reports)}",
        f"  Warnings:     {sum(r.warning_count for r in reports)}",
        f"  Suggestions:  {sum(r.suggestion_count for r in reports)}",
        f"  Observations: {sum(r.observation_count for r in reports)}",
        f"Average score:  {average_score(reports):.1f}/100",
    ]
    return "\n".join(lines)


def render_report(report: ComplianceReport) -> str:
    """Render one file's detail block."""
    lines = [
        f"{report.file_path}",
        f"  Score: {report.score:.1f}/100  Lines: {report.total_lines}  "
        f"Violations: {len(report.violations)}",
    ]

    ordered = sorted(report.violations, key=lambda v: (v.line, _SEVERITY_ORDER[v.severity]))
    for v in ordered:
        lines.append(f"  [{v.severity.value.upper()}] line {v.line} ({v.category.value}): {v.description}")
        if v.suggestion:
            lines.append(f"      -> {v.suggestion}")

    return "\n".join(lines)


def render_full(reports: Sequence[ComplianceReport], include_clean: bool = True) -> str:
    """Summary followed by one detail block per file."""
    blocks = [render_summary(reports)]
    for report in reports:
        if not include_clean and not report.violations:
            continue
        blocks.append(render_report(report))
    return "\n\n".join(blocks)

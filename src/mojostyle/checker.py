"""
Compliance checker.

Runs every detector over a file (or every file under a directory) and
builds one ComplianceReport per file. A file that cannot be read gets a
single FILE_ACCESS violation and a zero score; the scan carries on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import CheckerConfig
from .models import ComplianceReport, Severity, Violation
from .parser.lines import split_lines
from .rules import ALL_DETECTORS, Detector
from .scanner import discover_files, load_source

logger = logging.getLogger(__name__)


class ComplianceChecker:
    """
    Main checker class that runs detectors against Mojo sources.
    """

    def __init__(self, config: Optional[CheckerConfig] = None, detectors: Optional[Sequence[Detector]] = None):
        self.config = config or CheckerConfig()
        self.detectors = tuple(detectors) if detectors is not None else ALL_DETECTORS

    def collect_violations(self, text: str, path: str) -> list[Violation]:
        """Run every detector and return violations ordered by line."""
        violations: list[Violation] = []
        for detector in self.detectors:
            violations.extend(detector(text, path, self.config))

        if not self.config.show_observations:
            violations = [v for v in violations if v.severity != Severity.OBSERVATION]

        # Stable: detector order is kept for violations on the same line
        return sorted(violations, key=lambda v: v.line)

    def check_text(self, text: str, path: str = "<text>") -> ComplianceReport:
        """Check source text and return a scored report."""
        report = ComplianceReport(file_path=path, total_lines=len(split_lines(text)))
        for violation in self.collect_violations(text, path):
            report.add_violation(violation)
        report.calculate_score()
        return report

    def check_file(self, path: Path) -> ComplianceReport:
        """Check a file; read failures become a FILE_ACCESS report."""
        try:
            source = load_source(path)
        except OSError as e:
            logger.warning(f"Cannot read {path}: {e}")
            return ComplianceReport.for_unreadable(str(path), e.strerror or str(e))

        return self.check_text(source.text, str(path))

    def scan_directory(self, root: Path) -> list[ComplianceReport]:
        """Check every source file under root, in sorted order."""
        files = discover_files(root, self.config)
        logger.info(f"Scanning {len(files)} files under {root}")

        reports: list[ComplianceReport] = []
        for path in files:
            report = self.check_file(path)
            logger.debug(f"{path}: score {report.score:.1f}, {len(report.violations)} violations")
            reports.append(report)
        return reports


def check_file(path: Path, config: Optional[CheckerConfig] = None) -> ComplianceReport:
    """Convenience function to check one file."""
    return ComplianceChecker(config).check_file(path)


def scan_directory(root: Path, config: Optional[CheckerConfig] = None) -> list[ComplianceReport]:
    """Convenience function to check a directory tree."""
    return ComplianceChecker(config).scan_directory(root)

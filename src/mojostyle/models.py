"""
Violation and compliance report data model.

Handles:
- Severity and Category closed enumerations
- Violation records (immutable)
- ComplianceReport (one per scanned file) and its score formula
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable


class Severity(Enum):
    """Violation severity levels."""
    ERROR = "error"             # Counts 10 points against the score
    WARNING = "warning"         # Counts 5 points against the score
    SUGGESTION = "suggestion"   # Never affects the score
    OBSERVATION = "observation" # Never affects the score, hidden by default


class Category(Enum):
    """Rule families a violation can belong to."""
    IMPORT_PATTERN = "import pattern"
    STRUCT_PATTERN = "struct pattern"
    VARIABLE_DECLARATION = "variable declaration"
    GPU_PATTERN = "gpu pattern"
    DOCUMENTATION = "documentation"
    ERROR_HANDLING = "error handling"
    PERFORMANCE = "performance"
    MEMORY_SAFETY = "memory safety"
    FILE_ACCESS = "file access"


# Points deducted per violation; severities not listed deduct nothing.
SEVERITY_PENALTY = {
    Severity.ERROR: 10,
    Severity.WARNING: 5,
}

MAX_SCORE = 100.0


@dataclass(frozen=True)
class Violation:
    """A single detected deviation from the style standard."""
    file_path: str
    line: int                   # 1-based
    category: Category
    description: str
    suggestion: str
    severity: Severity

    def __str__(self) -> str:
        return (
            f"[{self.severity.value.upper()}] {self.file_path}:{self.line} "
            f"({self.category.value}) {self.description}"
        )


def compute_score(violations: Iterable[Violation]) -> float:
    """
    Score a violation set: 100 - 10 per error - 5 per warning, floored at 0.

    Clamping happens once, after the whole formula.
    """
    penalty = sum(SEVERITY_PENALTY.get(v.severity, 0) for v in violations)
    return max(0.0, MAX_SCORE - penalty)


@dataclass
class ComplianceReport:
    """Compliance result for one file."""
    file_path: str
    total_lines: int = 0
    violations: list[Violation] = field(default_factory=list)
    score: float = MAX_SCORE
    created_at: datetime = field(default_factory=datetime.now)

    def add_violation(self, violation: Violation) -> None:
        self.violations.append(violation)

    def calculate_score(self) -> float:
        """Finalize the score from the current violation list."""
        if self.total_lines == 0:
            self.score = MAX_SCORE
        else:
            self.score = compute_score(self.violations)
        return self.score

    def count(self, severity: Severity) -> int:
        return sum(1 for v in self.violations if v.severity == severity)

    @property
    def error_count(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def suggestion_count(self) -> int:
        return self.count(Severity.SUGGESTION)

    @property
    def observation_count(self) -> int:
        return self.count(Severity.OBSERVATION)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @classmethod
    def for_unreadable(cls, file_path: str, reason: str) -> "ComplianceReport":
        """Build the single-violation report used when a file cannot be read."""
        report = cls(file_path=file_path)
        report.add_violation(Violation(
            file_path=file_path,
            line=1,
            category=Category.FILE_ACCESS,
            description=f"Could not read file: {reason}",
            suggestion="Check that the file exists and is readable",
            severity=Severity.ERROR,
        ))
        report.score = 0.0
        return report

"""
Shared plumbing for detectors.

Every detector builds its own SourceContext from raw text, so line
classification is re-derived per detector and detectors stay independent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.lexer import mask_line
from ..parser.lines import LineClassifier, split_lines

Detector = Callable[[str, str, Optional[CheckerConfig]], list[Violation]]


@dataclass
class SourceContext:
    """One file's lines, classification and config, as seen by one detector."""
    path: str
    lines: list[str]
    config: CheckerConfig
    classifier: LineClassifier

    @classmethod
    def from_text(cls, text: str, path: str, config: Optional[CheckerConfig] = None) -> "SourceContext":
        config = config or CheckerConfig()
        lines = split_lines(text)
        return cls(
            path=path,
            lines=lines,
            config=config,
            classifier=LineClassifier(lines, check_docstring_code=config.check_docstring_code),
        )

    def checked(self) -> Iterator[tuple[int, str, str]]:
        """Yield (index, raw line, masked code) for every checkable line."""
        for i, line in self.classifier.checked_lines():
            yield i, line, mask_line(line)

    def is_excluded(self, index: int) -> bool:
        return self.classifier.is_excluded(index)

    def violation(
        self,
        index: int,
        category: Category,
        severity: Severity,
        description: str,
        suggestion: str,
    ) -> Violation:
        """Create a violation for 0-based line `index`."""
        return Violation(
            file_path=self.path,
            line=index + 1,
            category=category,
            description=description,
            suggestion=suggestion,
            severity=severity,
        )

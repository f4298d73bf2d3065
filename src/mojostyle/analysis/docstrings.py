"""
Docstring quality assessment.

Given the opener line of a docstring, reconstruct the block and classify
it. Single-line blocks only need enough text. Multi-line blocks are
scored on three signals: a substantive description, a parameters
section, a returns section. A Raises: section is recognised but never
required, since not every function raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..parser.lines import TRIPLE

LONG_DESCRIPTION = 50
MANY_LINES = 3

_RE_SECTION = re.compile(
    r"^(Args|Arguments|Parameters|Params|Returns|Return|Raises|Yields|"
    r"Constraints|Example|Examples|Note|Notes)\s*:"
)
_RE_PARAMS = re.compile(r"^(Args|Arguments|Parameters|Params)\s*:")
_RE_RETURNS = re.compile(r"^(Returns|Return)\s*:")
_RE_RAISES = re.compile(r"^Raises\s*:")


class DocstringQuality(Enum):
    APPROPRIATE = "appropriate"                 # single line, long enough
    COMPREHENSIVE = "comprehensive"             # multi-line, enough signals
    TOO_BRIEF = "too brief"
    MISSING_DESCRIPTION = "missing description"
    MISSING_SECTIONS = "missing sections"


@dataclass(frozen=True)
class DocstringAssessment:
    quality: DocstringQuality
    line_count: int                 # physical lines, delimiters included
    description: str = ""
    has_params: bool = False
    has_returns: bool = False
    has_raises: bool = False

    @property
    def acceptable(self) -> bool:
        return self.quality in (DocstringQuality.APPROPRIATE, DocstringQuality.COMPREHENSIVE)


def docstring_content(lines: Sequence[str], start: int) -> tuple[list[str], int]:
    """
    Content lines of the docstring opening at `start`, and its physical length.

    An unterminated docstring runs to the end of the file.
    """
    first = lines[start].strip()
    rest = first[first.find(TRIPLE) + len(TRIPLE):]

    if TRIPLE in rest:
        return [rest.split(TRIPLE, 1)[0].strip()], 1

    content = [rest.strip()]
    k = start + 1
    while k < len(lines):
        line = lines[k]
        if TRIPLE in line:
            content.append(line.split(TRIPLE, 1)[0].strip())
            return content, k - start + 1
        content.append(line.strip())
        k += 1
    return content, len(lines) - start


def assess_docstring(lines: Sequence[str], start: int, min_length: int = 10) -> DocstringAssessment:
    """Classify the docstring whose opening delimiter is on line `start`."""
    content, line_count = docstring_content(lines, start)

    if line_count == 1:
        text = content[0]
        quality = DocstringQuality.APPROPRIATE if len(text) > min_length else DocstringQuality.TOO_BRIEF
        return DocstringAssessment(quality=quality, line_count=1, description=text)

    non_empty = [c for c in content if c]

    description_parts: list[str] = []
    for c in non_empty:
        if _RE_SECTION.match(c):
            break
        description_parts.append(c)
    description = " ".join(description_parts)

    has_description = len(description) >= min_length
    has_params = any(_RE_PARAMS.match(c) for c in non_empty)
    has_returns = any(_RE_RETURNS.match(c) for c in non_empty)
    has_raises = any(_RE_RAISES.match(c) for c in non_empty)

    signals = sum((has_description, has_params, has_returns))
    if (
        signals >= 2
        or len(description) > LONG_DESCRIPTION
        or (len(non_empty) > MANY_LINES and has_description)
    ):
        quality = DocstringQuality.COMPREHENSIVE
    elif not description:
        quality = DocstringQuality.MISSING_DESCRIPTION
    elif not has_description:
        quality = DocstringQuality.TOO_BRIEF
    else:
        quality = DocstringQuality.MISSING_SECTIONS

    return DocstringAssessment(
        quality=quality,
        line_count=line_count,
        description=description,
        has_params=has_params,
        has_returns=has_returns,
        has_raises=has_raises,
    )

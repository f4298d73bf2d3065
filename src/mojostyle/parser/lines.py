"""
Line classification.

Decides, per physical line, whether the line is documentation or sample
code held in a string literal, and therefore must not be rule-checked.

Two exclusions compose with OR:
- variable literal: the line sits inside a triple-quoted string assigned
  to a variable (always active)
- documentation: an odd number of triple quotes from the start of the
  file through the line (disabled by check_docstring_code)

Both are intentionally conservative: they may over-exclude, never
under-exclude.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

TRIPLE = '"""'

# A bare assignment '=' (not ==, <=, >=, !=)
_RE_ASSIGN = re.compile(r"(?<![=!<>])=(?!=)")

# Only these end a physical line; form feeds and U+2028 stay inside it
_RE_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split text into physical lines, like str.splitlines() restricted to CR/LF."""
    lines = _RE_LINE_BREAK.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def line_ending(text: str) -> str:
    """The first line break used in text, '\\n' if there is none."""
    match = _RE_LINE_BREAK.search(text)
    return match.group() if match else "\n"


def _literal_opener_state(line: str) -> Optional[bool]:
    """
    Classify a line as a variable-literal opener.

    Returns None if the line does not assign a triple-quoted string,
    False if the literal also closes on this line, True if it stays open.
    """
    idx = line.find(TRIPLE)
    if idx < 0:
        return None
    before = line[:idx]
    if "#" in before or not _RE_ASSIGN.search(before):
        return None
    return line[idx:].count(TRIPLE) % 2 == 1


def _closes_after_text(line: str) -> bool:
    """True if the first triple quote on the line has text before it."""
    idx = line.find(TRIPLE)
    return idx > 0 and bool(line[:idx].strip())


def in_variable_literal(lines: Sequence[str], i: int) -> bool:
    """
    True if line i lies inside a variable-assigned triple-quoted string.

    The closing line counts when text precedes its delimiter.
    """
    for j in range(i - 1, -1, -1):
        state = _literal_opener_state(lines[j])
        if state is None:
            continue
        if state is False:
            # Closed on its own line; keep looking further back.
            continue
        for k in range(j + 1, len(lines)):
            if TRIPLE in lines[k]:
                if i == k:
                    return _closes_after_text(lines[k])
                return j < i < k
        # Unterminated literal runs to end of file
        return i > j
    return False


def in_documentation(lines: Sequence[str], i: int) -> bool:
    """
    True if an odd number of triple quotes appear in lines 0..i inclusive,
    or if line i closes an open block after some text.
    """
    before = sum(line.count(TRIPLE) for line in lines[:i])
    if (before + lines[i].count(TRIPLE)) % 2 == 1:
        return True
    return before % 2 == 1 and _closes_after_text(lines[i])


def is_excluded(lines: Sequence[str], i: int, check_docstring_code: bool = False) -> bool:
    """
    Decide whether line i (0-based) must be skipped by rule checks.

    The variable-literal exclusion always runs; the documentation
    exclusion runs unless check_docstring_code is set.
    """
    if in_variable_literal(lines, i):
        return True
    if not check_docstring_code and in_documentation(lines, i):
        return True
    return False


class LineClassifier:
    """
    Precomputed is_excluded() for every line of one file.

    Same semantics as is_excluded(), computed in one pass so detectors can
    ask about every line cheaply.
    """

    def __init__(self, lines: Sequence[str], check_docstring_code: bool = False):
        self.lines = list(lines)
        self.check_docstring_code = check_docstring_code
        self._excluded = self._classify()

    def _classify(self) -> list[bool]:
        n = len(self.lines)
        excluded = [False] * n

        # Documentation: running parity of triple quotes
        if not self.check_docstring_code:
            parity = 0
            for i, line in enumerate(self.lines):
                was_open = parity == 1
                parity = (parity + line.count(TRIPLE)) % 2
                excluded[i] = parity == 1 or (was_open and _closes_after_text(line))

        # Variable literals: nearest open opener before each line
        opener: Optional[int] = None
        closer: Optional[int] = None
        for i, line in enumerate(self.lines):
            if opener is not None and i > opener:
                if closer is None or i < closer:
                    excluded[i] = True
                elif i == closer and _closes_after_text(line):
                    excluded[i] = True
            # Line i becomes the nearest opener for the lines after it
            if _literal_opener_state(line) is True:
                opener = i
                closer = next(
                    (k for k in range(i + 1, n) if TRIPLE in self.lines[k]),
                    None,
                )
        return excluded

    def is_excluded(self, i: int) -> bool:
        return self._excluded[i]

    def checked_lines(self) -> list[tuple[int, str]]:
        """(index, text) for every line that rules may inspect."""
        return [(i, line) for i, line in enumerate(self.lines) if not self._excluded[i]]

    def __len__(self) -> int:
        return len(self.lines)

"""
Structural extraction.

Finds declarations (struct, trait, fn, def) and the textual extent of
their bodies without building a syntax tree:

1. Header end: scan forward from the header line balancing brackets; the
   first line where brackets balance and a top-level ':' appears ends it.
2. Body: lines indented deeper than the header line, stopping at the first
   non-empty, non-comment line at or below the header's indentation.

The same two phases extract a method body from a method header line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .lexer import (
    CLOSERS,
    OPENERS,
    TokenType,
    code_tokens,
    indent_width,
    is_comment_line,
    mask_line,
    opens_block,
)
from .lines import TRIPLE, LineClassifier

_RE_DECLARATION = re.compile(r"^(\s*)(struct|trait|fn|def)\s+([A-Za-z_]\w*)")
_RE_LOOP = re.compile(r"^\s*(for|while)\b")


@dataclass(frozen=True)
class Declaration:
    """A struct, trait or function header found in the source."""
    kind: str                       # "struct", "trait", "fn", "def"
    name: str
    line: int                       # 0-based header line
    indent: int
    decorators: tuple[str, ...] = ()

    @property
    def is_type(self) -> bool:
        return self.kind in ("struct", "trait")

    @property
    def is_function(self) -> bool:
        return self.kind in ("fn", "def")


@dataclass(frozen=True)
class Block:
    """Line extent of a declaration: header lines plus indented body."""
    header_start: int
    header_end: int
    body_start: int                 # first line after the header
    body_end: int                   # exclusive
    header_indent: int
    body_indent: Optional[int]

    @property
    def is_empty(self) -> bool:
        return self.body_end <= self.body_start

    def header_lines(self, lines: Sequence[str]) -> list[str]:
        return list(lines[self.header_start:self.header_end + 1])

    def body_lines(self, lines: Sequence[str]) -> list[str]:
        return list(lines[self.body_start:self.body_end])


def find_header_end(lines: Sequence[str], start: int) -> Optional[int]:
    """
    Return the index of the line that ends the header starting at `start`.

    Returns None when the brackets balance without a top-level ':' (the
    line is a declaration without a body) or the file ends first.
    """
    depth = 0
    for k in range(start, len(lines)):
        saw_colon = False
        for tok in code_tokens(lines[k]):
            if tok.type in OPENERS:
                depth += 1
            elif tok.type in CLOSERS:
                depth -= 1
            elif tok.type == TokenType.COLON and depth <= 0:
                saw_colon = True
        if depth <= 0:
            return k if saw_colon else None
    return None


def extract_block(lines: Sequence[str], start: int) -> Optional[Block]:
    """
    Extract the header and body extent of the declaration at `start`.

    A header whose colon is followed by code on the same line (an inline
    body) yields an empty body.
    """
    header_end = find_header_end(lines, start)
    if header_end is None:
        return None

    header_indent = indent_width(lines[start])
    body_start = header_end + 1

    if not opens_block(lines[header_end]):
        return Block(start, header_end, body_start, body_start, header_indent, None)

    body_indent: Optional[int] = None
    last_content = header_end
    in_string = False

    for k in range(body_start, len(lines)):
        line = lines[k]

        # Inside a triple-quoted string opened in the body: keep regardless of indent
        if in_string:
            if line.count(TRIPLE) % 2 == 1:
                in_string = False
            last_content = k
            continue

        if not line.strip() or is_comment_line(line):
            continue

        indent = indent_width(line)
        if indent <= header_indent:
            break

        if body_indent is None:
            body_indent = indent
        if line.count(TRIPLE) % 2 == 1:
            in_string = True
        last_content = k

    return Block(start, header_end, body_start, last_content + 1, header_indent, body_indent)


def find_declarations(
    lines: Sequence[str],
    classifier: Optional[LineClassifier] = None,
    kinds: Optional[set[str]] = None,
) -> list[Declaration]:
    """Find declaration headers, skipping excluded lines."""
    found: list[Declaration] = []
    for i, line in enumerate(lines):
        if classifier is not None and classifier.is_excluded(i):
            continue
        m = _RE_DECLARATION.match(mask_line(line))
        if not m:
            continue
        kind = m.group(2)
        if kinds is not None and kind not in kinds:
            continue
        found.append(Declaration(
            kind=kind,
            name=m.group(3),
            line=i,
            indent=indent_width(line),
            decorators=_decorators_above(lines, i),
        ))
    return found


def _decorators_above(lines: Sequence[str], index: int) -> tuple[str, ...]:
    """Decorator names on the lines directly above a header, top to bottom."""
    names: list[str] = []
    k = index - 1
    while k >= 0:
        stripped = lines[k].strip()
        if not stripped.startswith("@"):
            break
        names.append(re.split(r"[\s(\[]", stripped[1:], maxsplit=1)[0])
        k -= 1
    return tuple(reversed(names))


def find_method(lines: Sequence[str], block: Block, name: str) -> Optional[int]:
    """Index of the `fn <name>(` header directly inside a block body, if any."""
    pattern = re.compile(rf"^\s*fn\s+{re.escape(name)}\s*[\[(]")
    for k in range(block.body_start, block.body_end):
        if block.body_indent is not None and indent_width(lines[k]) != block.body_indent:
            continue
        if pattern.match(mask_line(lines[k])):
            return k
    return None


def is_docstring_start(line: str) -> bool:
    return line.lstrip().startswith(TRIPLE)


def first_statement(lines: Sequence[str], block: Block) -> Optional[int]:
    """Index of the first non-blank, non-comment line of the body."""
    for k in range(block.body_start, block.body_end):
        if lines[k].strip() and not is_comment_line(lines[k]):
            return k
    return None


def loop_depths(lines: Sequence[str], classifier: Optional[LineClassifier] = None) -> list[int]:
    """
    Number of enclosing for/while loops for each line.

    A loop header line is not counted as inside its own loop. Blank,
    comment and excluded lines inherit the depth of the previous code line.
    """
    depths = [0] * len(lines)
    stack: list[int] = []
    current = 0
    for i, line in enumerate(lines):
        excluded = classifier is not None and classifier.is_excluded(i)
        if excluded or not line.strip() or is_comment_line(line):
            depths[i] = current
            continue
        indent = indent_width(line)
        while stack and stack[-1] >= indent:
            stack.pop()
        depths[i] = len(stack)
        masked = mask_line(line)
        if _RE_LOOP.match(masked) and opens_block(line):
            stack.append(indent)
        current = len(stack)
    return depths

"""
Struct lifecycle analysis.

Derives two independent facts from one struct declaration:

- StructInfo: which capability traits the header declares
- LifecycleAnalysis: whether __copyinit__ / __moveinit__ are trivial,
  i.e. nothing but `self.f = other.f` (copy) or `self.f = other.f^` (move)

Both are read-only once built. They are only combined by traits.py.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ..parser.lexer import indent_width, is_comment_line, mask_line
from ..parser.lines import TRIPLE
from ..parser.structure import Block, extract_block, find_method

COPY_TRAITS = frozenset({"Copyable", "ImplicitlyCopyable"})
MOVE_TRAITS = frozenset({"Movable"})

COPY_METHOD = "__copyinit__"
MOVE_METHOD = "__moveinit__"

# Argument conventions that can prefix a parameter name
_CONVENTIONS = frozenset({
    "owned", "var", "read", "borrowed", "mut", "inout", "out", "deinit", "ref",
})

_RE_STRUCT_NAME = re.compile(r"\bstruct\s+([A-Za-z_]\w*)")
_RE_FIELD = re.compile(r"^\s*var\s+([A-Za-z_]\w*)\s*:")


@dataclass(frozen=True)
class StructInfo:
    """Traits declared on a struct header."""
    name: str
    has_copy_trait: bool
    has_move_trait: bool
    line: int = 0                   # 0-based header line
    traits: tuple[str, ...] = ()


@dataclass(frozen=True)
class LifecycleAnalysis:
    """Triviality of a struct's copy and move constructors."""
    trivial_copy: bool = False
    trivial_move: bool = False
    needs_custom_copy: bool = False
    needs_custom_move: bool = False
    copy_line: Optional[int] = None     # offset from the struct body start
    move_line: Optional[int] = None

    @property
    def has_copy_method(self) -> bool:
        return self.copy_line is not None

    @property
    def has_move_method(self) -> bool:
        return self.move_line is not None


# =============================================================================
# Header parsing
# =============================================================================

def _balanced_span(text: str, start: int, open_ch: str, close_ch: str) -> Optional[int]:
    """Index just past the bracket group opening at text[start], or None."""
    depth = 0
    for i in range(start, len(text)):
        if text[i] == open_ch:
            depth += 1
        elif text[i] == close_ch:
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """Split on `sep` outside of any bracket group."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def locate_trait_list(header: str) -> Optional[tuple[int, Optional[int]]]:
    """
    Find the trait list in a struct header.

    Returns (start, end): `start` is the index of '(' and `end` the index
    just past ')'. Without a trait list `end` is None and `start` is where
    one would be inserted. None when the header cannot be followed.
    """
    m = _RE_STRUCT_NAME.search(header)
    if not m:
        return None
    pos = m.end()

    while pos < len(header) and header[pos].isspace():
        pos += 1
    if pos < len(header) and header[pos] == "[":
        end = _balanced_span(header, pos, "[", "]")
        if end is None:
            return None
        pos = end
    while pos < len(header) and header[pos].isspace():
        pos += 1
    if pos >= len(header) or header[pos] != "(":
        return pos, None

    end = _balanced_span(header, pos, "(", ")")
    if end is None:
        return None
    return pos, end


def parse_trait_list(header: str) -> tuple[str, tuple[str, ...]]:
    """
    Extract (struct name, declared traits) from a struct header.

    Compile-time parameters in [...] are skipped, so `T: Copyable` in the
    parameter list is not mistaken for a declared trait.
    """
    m = _RE_STRUCT_NAME.search(header)
    if not m:
        return "", ()
    name = m.group(1)

    span = locate_trait_list(header)
    if span is None or span[1] is None:
        return name, ()
    start, end = span

    traits: list[str] = []
    for item in split_top_level(header[start + 1:end - 1]):
        for part in item.split("&"):
            base = part.split("[", 1)[0].strip()
            if base:
                traits.append(base.rsplit(".", 1)[-1])
    return name, tuple(traits)


def parse_struct_info(lines: Sequence[str], block: Block) -> StructInfo:
    """Build StructInfo from a struct's header lines."""
    header = " ".join(mask_line(l).strip() for l in block.header_lines(lines))
    name, traits = parse_trait_list(header)
    return StructInfo(
        name=name,
        has_copy_trait=any(t in COPY_TRAITS for t in traits),
        has_move_trait=any(t in MOVE_TRAITS for t in traits),
        line=block.header_start,
        traits=traits,
    )


def struct_fields(lines: Sequence[str], block: Block) -> list[str]:
    """Names of `var` fields declared directly in the struct body."""
    names: list[str] = []
    for k in range(block.body_start, block.body_end):
        line = lines[k]
        if indent_width(line) != block.body_indent:
            continue
        m = _RE_FIELD.match(mask_line(line))
        if m:
            names.append(m.group(1))
    return names


# =============================================================================
# Method classification
# =============================================================================

def parameter_list(header: str) -> list[tuple[tuple[str, ...], str, str]]:
    """
    Parse the run-time parameter list of a function header.

    Returns (conventions, name, type) per parameter; compile-time
    parameters in [...] are skipped.
    """
    pos = header.find("(")
    bracket = header.find("[")
    if 0 <= bracket < pos:
        after = _balanced_span(header, bracket, "[", "]")
        pos = header.find("(", after) if after is not None else -1
    if pos < 0:
        return []
    end = _balanced_span(header, pos, "(", ")")
    if end is None:
        return []

    params: list[tuple[tuple[str, ...], str, str]] = []
    for param in split_top_level(header[pos + 1:end - 1]):
        name_text, _, type_text = param.partition(":")
        words = name_text.split()
        conventions: list[str] = []
        while words and words[0] in _CONVENTIONS:
            conventions.append(words.pop(0))
        if not words:
            continue
        params.append((tuple(conventions), words[0], type_text.split("=", 1)[0].strip()))
    return params


def source_parameter(header: str) -> Optional[str]:
    """Name of the first non-self parameter in a method header."""
    for _, name, _ in parameter_list(header):
        if name != "self":
            return name
    return None


def method_statements(lines: Sequence[str], block: Block) -> list[str]:
    """Code lines of a method body: no blanks, comments or docstring lines."""
    statements: list[str] = []
    in_doc = False
    for line in block.body_lines(lines):
        stripped = line.strip()
        if in_doc:
            if line.count(TRIPLE) % 2 == 1:
                in_doc = False
            continue
        if stripped.startswith(TRIPLE):
            if stripped.count(TRIPLE) % 2 == 1:
                in_doc = True
            continue
        if not stripped or is_comment_line(line):
            continue
        statements.append(mask_line(line).strip())
    return statements


def is_trivial_body(
    statements: Sequence[str],
    source: Optional[str],
    move: bool,
    fields: Optional[Sequence[str]] = None,
) -> bool:
    """
    True if every statement is a same-name field copy (or move) from `source`.

    Any other statement, a repeated target, or (when `fields` is known and
    non-empty) a field left out makes the body non-trivial. An empty body
    is not trivial.
    """
    if source is None or not statements:
        return False

    sigil = r"(\s*\^)?" if move else ""
    pattern = re.compile(
        rf"^self\.([A-Za-z_]\w*)\s*=\s*{re.escape(source)}\.([A-Za-z_]\w*){sigil}$"
    )

    assigned: list[str] = []
    for stmt in statements:
        m = pattern.match(stmt)
        if not m or m.group(1) != m.group(2):
            return False
        assigned.append(m.group(1))

    if len(set(assigned)) != len(assigned):
        return False
    if fields and set(assigned) != set(fields):
        return False
    return True


def _classify_method(
    lines: Sequence[str],
    header_index: Optional[int],
    move: bool,
    fields: Sequence[str],
) -> bool:
    if header_index is None:
        return False
    method = extract_block(lines, header_index)
    if method is None or method.is_empty:
        return False
    header = " ".join(mask_line(l).strip() for l in method.header_lines(lines))
    return is_trivial_body(
        method_statements(lines, method),
        source_parameter(header),
        move=move,
        fields=fields,
    )


def analyze_lifecycle(lines: Sequence[str], block: Block) -> LifecycleAnalysis:
    """Classify the copy and move constructors found in a struct body."""
    fields = struct_fields(lines, block)
    copy_idx = find_method(lines, block, COPY_METHOD)
    move_idx = find_method(lines, block, MOVE_METHOD)

    trivial_copy = _classify_method(lines, copy_idx, move=False, fields=fields)
    trivial_move = _classify_method(lines, move_idx, move=True, fields=fields)

    return LifecycleAnalysis(
        trivial_copy=trivial_copy,
        trivial_move=trivial_move,
        needs_custom_copy=copy_idx is not None and not trivial_copy,
        needs_custom_move=move_idx is not None and not trivial_move,
        copy_line=None if copy_idx is None else copy_idx - block.body_start,
        move_line=None if move_idx is None else move_idx - block.body_start,
    )

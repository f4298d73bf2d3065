"""
Mojo Source Lexer (Tokenizer)

A minimal, error-tolerant tokenizer for Mojo source text.
Handles: identifiers, numbers, strings (including triple-quoted),
comments, brackets, and operators.

It exists so that rule code can ask "what does this line contain as code"
without tripping over string contents or trailing comments. It does not
know the grammar and never raises on odd input.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from typing import Iterator, List, Optional


class TokenType(Enum):
    """Types of tokens in Mojo source."""
    IDENTIFIER = auto()      # foo, __copyinit__, UnsafePointer
    STRING = auto()          # "text", 'text', """text"""
    NUMBER = auto()          # 123, 0.5, 0xFF
    OPERATOR = auto()        # = == -> ^ += etc.
    LPAREN = auto()          # (
    RPAREN = auto()          # )
    LBRACKET = auto()        # [
    RBRACKET = auto()        # ]
    LBRACE = auto()          # {
    RBRACE = auto()          # }
    COLON = auto()           # :
    COMMA = auto()           # ,
    DOT = auto()             # .
    COMMENT = auto()         # # comment to end of line
    NEWLINE = auto()         # \n
    EOF = auto()             # End of input


OPENERS = frozenset({TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE})
CLOSERS = frozenset({TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE})

_SINGLE_CHAR = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
}

# Longest first
_MULTI_CHAR_OPS = (
    "//=", "**=", ">>=", "<<=",
    "==", "!=", "<=", ">=", "->", "+=", "-=", "*=", "/=", "%=", "&=", "|=",
    "^=", "//", "**", "<<", ">>", ":=", "@=",
)

TRIPLE_QUOTES = ('"""', "'''")


@dataclass
class Token:
    """A single token. `value` is the raw source text of the token."""
    type: TokenType
    value: str
    line: int
    column: int
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.value)

    def __repr__(self):
        if self.type == TokenType.NEWLINE:
            return f"Token({self.type.name}, '\\n', L{self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.column})"


class Lexer:
    """
    Tokenizer for Mojo source text.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer.tokenize())
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.length = len(source)

    def _current(self) -> Optional[str]:
        if self.pos >= self.length:
            return None
        return self.source[self.pos]

    def _startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.pos)

    def _advance(self, count: int = 1) -> None:
        for _ in range(count):
            ch = self._current()
            if ch is None:
                return
            self.pos += 1
            if ch == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1

    def _skip_whitespace(self) -> None:
        """Skip spaces and tabs (but not newlines)."""
        while self._current() in (" ", "\t", "\r", "\f"):
            self._advance()

    def _read_triple_string(self, quote: str) -> None:
        """Advance over a triple-quoted string. Unterminated runs to EOF."""
        self._advance(3)
        while self._current() is not None:
            if self._current() == "\\":
                self._advance(2)
                continue
            if self._startswith(quote):
                self._advance(3)
                return
            self._advance()

    def _read_string(self, quote: str) -> None:
        """Advance over a single-line string. Unterminated ends at the newline."""
        self._advance()
        while True:
            ch = self._current()
            if ch is None or ch == "\n":
                return
            if ch == "\\":
                self._advance(2)
                continue
            self._advance()
            if ch == quote:
                return

    def _read_while(self, predicate) -> None:
        while self._current() is not None and predicate(self._current()):
            self._advance()

    def tokenize(self, include_comments: bool = False, include_newlines: bool = False) -> Iterator[Token]:
        """
        Generate tokens from the source.

        Args:
            include_comments: If True, emit COMMENT tokens. Otherwise skip them.
            include_newlines: If True, emit NEWLINE tokens. Otherwise skip them.
        """
        while True:
            self._skip_whitespace()

            ch = self._current()
            start = self.pos
            start_line = self.line
            start_col = self.column

            if ch is None:
                yield Token(TokenType.EOF, "", start_line, start_col, start)
                break

            if ch == "\n":
                self._advance()
                if include_newlines:
                    yield Token(TokenType.NEWLINE, "\n", start_line, start_col, start)
                continue

            if ch == "#":
                self._read_while(lambda c: c != "\n")
                if include_comments:
                    yield Token(TokenType.COMMENT, self.source[start:self.pos], start_line, start_col, start)
                continue

            if ch in ('"', "'"):
                triple = ch * 3
                if self._startswith(triple):
                    self._read_triple_string(triple)
                else:
                    self._read_string(ch)
                yield Token(TokenType.STRING, self.source[start:self.pos], start_line, start_col, start)
                continue

            if ch.isdigit():
                self._read_while(lambda c: c.isalnum() or c in "._")
                yield Token(TokenType.NUMBER, self.source[start:self.pos], start_line, start_col, start)
                continue

            if ch == "_" or ch.isalpha():
                self._read_while(lambda c: c == "_" or c.isalnum())
                yield Token(TokenType.IDENTIFIER, self.source[start:self.pos], start_line, start_col, start)
                continue

            if ch == ":" and not self._startswith(":="):
                self._advance()
                yield Token(TokenType.COLON, ":", start_line, start_col, start)
                continue

            if ch in _SINGLE_CHAR:
                self._advance()
                yield Token(_SINGLE_CHAR[ch], ch, start_line, start_col, start)
                continue

            op = next((o for o in _MULTI_CHAR_OPS if self._startswith(o)), ch)
            self._advance(len(op))
            yield Token(TokenType.OPERATOR, op, start_line, start_col, start)

    def tokenize_all(self, include_comments: bool = False, include_newlines: bool = False) -> List[Token]:
        """Convenience method to get all tokens as a list."""
        return list(self.tokenize(include_comments, include_newlines))


# =============================================================================
# Line-level helpers
# =============================================================================

@lru_cache(maxsize=8192)
def tokenize_line(line: str) -> tuple[Token, ...]:
    """Tokenize one physical line, comments included, EOF dropped."""
    return tuple(
        t for t in Lexer(line).tokenize(include_comments=True)
        if t.type != TokenType.EOF
    )


def _quote_width(raw: str) -> int:
    return 3 if raw.startswith(TRIPLE_QUOTES) else 1


@lru_cache(maxsize=8192)
def mask_line(line: str) -> str:
    """
    Return the line with string contents blanked and comments removed.

    Quote characters stay in place so columns are preserved and a reader
    can still see that a string was there.
    """
    chars = list(line)
    for tok in tokenize_line(line):
        if tok.type == TokenType.COMMENT:
            for i in range(tok.offset, tok.end):
                chars[i] = " "
        elif tok.type == TokenType.STRING:
            width = _quote_width(tok.value)
            closed = len(tok.value) >= 2 * width and tok.value.endswith(tok.value[0] * width)
            inner_end = tok.end - width if closed else tok.end
            for i in range(tok.offset + width, inner_end):
                chars[i] = " "
    return "".join(chars).rstrip()


def code_tokens(line: str) -> list[Token]:
    """Tokens of a line without comments."""
    return [t for t in tokenize_line(line) if t.type != TokenType.COMMENT]


def opens_block(line: str) -> bool:
    """True if the code on this line ends with a block-opening colon."""
    toks = code_tokens(line)
    return bool(toks) and toks[-1].type == TokenType.COLON


def is_comment_line(line: str) -> bool:
    return line.lstrip().startswith("#")


def indent_width(line: str) -> int:
    """Indentation width, tabs counted as four columns."""
    width = 0
    for ch in line:
        if ch == "\t":
            width += 4
        elif ch == " ":
            width += 1
        else:
            break
    return width

"""
mojostyle.parser - approximate structure of Mojo source text

Tokenizer, line classification and indentation-based block extraction.
No syntax tree is built.
"""

from mojostyle.parser.lexer import (
    Lexer,
    Token,
    TokenType,
    code_tokens,
    indent_width,
    mask_line,
    opens_block,
    tokenize_line,
)
from mojostyle.parser.lines import LineClassifier, is_excluded
from mojostyle.parser.structure import (
    Block,
    Declaration,
    extract_block,
    find_declarations,
    find_header_end,
    find_method,
    loop_depths,
)

__all__ = [
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "code_tokens",
    "indent_width",
    "mask_line",
    "opens_block",
    "tokenize_line",
    # Line classification
    "LineClassifier",
    "is_excluded",
    # Structure
    "Block",
    "Declaration",
    "extract_block",
    "find_declarations",
    "find_header_end",
    "find_method",
    "loop_depths",
]

"""
Tests for the Mojo tokenizer and its line helpers.
"""

import pytest
from mojostyle.parser.lexer import (
    Lexer,
    TokenType,
    code_tokens,
    indent_width,
    mask_line,
    opens_block,
    tokenize_line,
)


class TestTokenize:
    """Test token recognition."""

    def test_empty_source(self):
        """Only EOF for empty input."""
        tokens = Lexer("").tokenize_all()
        assert [t.type for t in tokens] == [TokenType.EOF]

    def test_identifiers_and_operators(self):
        """Identifiers, arrows and colons."""
        tokens = [t for t in tokenize_line("fn add(a: Int) -> Int:")]
        types = [t.type for t in tokens]
        assert types == [
            TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.LPAREN,
            TokenType.IDENTIFIER, TokenType.COLON, TokenType.IDENTIFIER,
            TokenType.RPAREN, TokenType.OPERATOR, TokenType.IDENTIFIER,
            TokenType.COLON,
        ]
        assert tokens[7].value == "->"

    def test_offsets(self):
        """Offsets index into the raw line."""
        line = "var x = 42"
        for tok in tokenize_line(line):
            assert line[tok.offset:tok.end] == tok.value

    def test_comment_token(self):
        """Comments run to end of line."""
        tokens = tokenize_line("x = 1  # note")
        assert tokens[-1].type == TokenType.COMMENT
        assert tokens[-1].value == "# note"

    def test_hash_inside_string_is_not_comment(self):
        """A '#' inside a string stays in the string."""
        tokens = tokenize_line('print("# not a comment")')
        assert not any(t.type == TokenType.COMMENT for t in tokens)

    def test_unterminated_string_does_not_raise(self):
        """Odd input never raises."""
        tokens = tokenize_line('print("oops')
        assert tokens[-1].type == TokenType.STRING

    def test_triple_string_spans_lines(self):
        """A triple-quoted string is one token across newlines."""
        tokens = Lexer('x = """a\nb"""\ny').tokenize_all()
        strings = [t for t in tokens if t.type == TokenType.STRING]
        assert len(strings) == 1
        assert strings[0].value == '"""a\nb"""'
        assert tokens[-2].value == "y"
        assert tokens[-2].line == 3


class TestLineHelpers:
    """Test per-line helpers used by the detectors."""

    def test_mask_blanks_strings_and_comments(self):
        """String contents and comments disappear, columns stay."""
        line = 'x = "let y" # let'
        masked = mask_line(line)
        assert "let" not in masked
        assert masked.startswith('x = "')
        assert len(masked) <= len(line)

    def test_mask_keeps_code(self):
        """Plain code is untouched."""
        assert mask_line("let x = 5") == "let x = 5"

    def test_code_tokens_drop_comments(self):
        """code_tokens never yields comments."""
        assert all(t.type != TokenType.COMMENT for t in code_tokens("a  # b"))

    @pytest.mark.parametrize("line,expected", [
        ("struct Foo:", True),
        ("fn f() -> Int:  # body follows", True),
        ("fn f(): return 1", False),
        ('x = ":"', False),
    ])
    def test_opens_block(self, line, expected):
        """Only a trailing code colon opens a block."""
        assert opens_block(line) is expected

    def test_indent_width_counts_tabs_as_four(self):
        """Tabs count as four columns."""
        assert indent_width("\t  x") == 6
        assert indent_width("x") == 0

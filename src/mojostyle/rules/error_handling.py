"""
Error handling rules.

- bare `except:` swallows every error without naming it
- `Error()` / `Error("")` raise an error with nothing to say
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import CheckerConfig
from ..models import Category, Severity, Violation
from ..parser.lexer import Token, TokenType, code_tokens
from .base import SourceContext
from .patterns import RE_BARE_EXCEPT


def _is_empty_string(tok: Token) -> bool:
    return tok.type == TokenType.STRING and tok.value in ('""', "''", '""""""', "''''''")


def _has_messageless_error(tokens: Sequence[Token]) -> bool:
    """True if the tokens contain Error() or Error("")."""
    for k, tok in enumerate(tokens):
        if tok.type != TokenType.IDENTIFIER or tok.value != "Error":
            continue
        rest = tokens[k + 1:k + 4]
        if len(rest) >= 2 and rest[0].type == TokenType.LPAREN and rest[1].type == TokenType.RPAREN:
            return True
        if (
            len(rest) >= 3
            and rest[0].type == TokenType.LPAREN
            and _is_empty_string(rest[1])
            and rest[2].type == TokenType.RPAREN
        ):
            return True
    return False


def check_error_handling(text: str, path: str, config: Optional[CheckerConfig] = None) -> list[Violation]:
    """Check exception handling hygiene."""
    ctx = SourceContext.from_text(text, path, config)
    findings: list[Violation] = []

    for i, line, code in ctx.checked():
        if RE_BARE_EXCEPT.match(code):
            findings.append(ctx.violation(
                i, Category.ERROR_HANDLING, Severity.WARNING,
                "Catch-all 'except:' without binding the error",
                "Use 'except e:' and handle or re-raise the error",
            ))

        if _has_messageless_error(code_tokens(line)):
            findings.append(ctx.violation(
                i, Category.ERROR_HANDLING, Severity.SUGGESTION,
                "Error constructed without a descriptive message",
                'Pass a message describing the failure, e.g. Error("index out of range")',
            ))

    return findings

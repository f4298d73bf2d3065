"""
Automatic fixes.

Pipeline for one file:

    Read -> Backup -> Transform -> Write -> Validate -> (Rollback | Cleanup)

The backup is durable before the file is rewritten. When backups are
disabled the original bytes are kept in memory instead, so a failed
validation can always be rolled back. Validation runs to completion before
any backup is cleaned up.

Transforms, applied in this order, each re-reading the output of the last:

1. relative imports rewritten against the enclosing package
2. `let` bindings turned into `var` with a TODO marker
3. trivial __copyinit__ / __moveinit__ removed, trait added to the header
4. placeholder docstrings for undocumented declarations

Lines inside documentation and string literals are never touched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..analysis.lifecycle import analyze_lifecycle, locate_trait_list, parse_struct_info
from ..analysis.traits import suggest_trait_changes
from ..config import CheckerConfig
from ..errors import BackupError
from ..parser.lexer import TokenType, indent_width, is_comment_line, mask_line, tokenize_line
from ..parser.lines import LineClassifier, line_ending, split_lines
from ..parser.structure import Block, extract_block, find_declarations, first_statement, is_docstring_start
from ..rules.patterns import RE_FROM_IMPORT, RE_LET_BINDING
from .backup import BackupManager
from .validation import BuildValidator, ValidationResult, ValidationStatus

logger = logging.getLogger(__name__)

LET_MARKER = "TODO: converted from 'let', confirm the value is never reassigned"
DOCSTRING_PLACEHOLDER = '"""TODO: Document {name}."""'

_RE_RELATIVE_FROM = re.compile(r"^(\s*from\s+)(\.+)([\w.]*)(?=\s+import\b)")


@dataclass(frozen=True)
class FixChange:
    """One applied edit. `line` is 1-based in the text the transform saw."""
    line: int
    kind: str
    description: str


@dataclass
class FixResult:
    """Outcome of fixing one file."""
    path: str
    success: bool
    changes: list[FixChange] = field(default_factory=list)
    applied: bool = False
    backup_path: Optional[str] = None
    validation: Optional[ValidationResult] = None
    rolled_back: bool = False
    message: str = ""


@dataclass(frozen=True)
class FixContext:
    package: tuple[str, ...]
    check_docstring_code: bool


Transform = Callable[[list[str], FixContext], list[FixChange]]


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


# =============================================================================
# Transforms
# =============================================================================

def package_parts(path: Path, extensions: Sequence[str] = (".mojo", ".🔥")) -> tuple[str, ...]:
    """
    Dotted package path of the directory holding `path`.

    Walks up while each directory has an `__init__` source file.
    """
    parts: list[str] = []
    directory = path.resolve().parent
    while any((directory / f"__init__{ext}").is_file() for ext in extensions):
        parts.insert(0, directory.name)
        if directory.parent == directory:
            break
        directory = directory.parent
    return tuple(parts)


def absolute_module(level: int, module: str, package: Sequence[str]) -> Optional[str]:
    """
    Resolve a relative module against the enclosing package.

    Outside a package, or when the dots climb past its root, the dots are
    simply dropped. Returns None if nothing would remain.
    """
    if package and level - 1 < len(package):
        base = list(package[: len(package) - (level - 1)])
    else:
        base = []
    if module:
        base.append(module)
    return ".".join(base) or None


def fix_relative_imports(lines: list[str], ctx: FixContext) -> list[FixChange]:
    classifier = LineClassifier(lines, ctx.check_docstring_code)
    changes: list[FixChange] = []

    for i, line in classifier.checked_lines():
        if not RE_FROM_IMPORT.match(mask_line(line)):
            continue
        m = _RE_RELATIVE_FROM.match(line)
        if not m:
            continue
        resolved = absolute_module(len(m.group(2)), m.group(3), ctx.package)
        if resolved is None:
            logger.debug(f"Cannot resolve relative import on line {i + 1}")
            continue
        lines[i] = m.group(1) + resolved + line[m.end():]
        changes.append(FixChange(
            i + 1, "import",
            f"Rewrote '{m.group(2)}{m.group(3)}' as '{resolved}'",
        ))

    return changes


def fix_let_bindings(lines: list[str], ctx: FixContext) -> list[FixChange]:
    classifier = LineClassifier(lines, ctx.check_docstring_code)
    changes: list[FixChange] = []

    for i, line in classifier.checked_lines():
        if not RE_LET_BINDING.match(mask_line(line)):
            continue
        indent = _indent_of(line)
        rewritten = indent + "var" + line[len(indent) + 3:]

        comment = next((t for t in tokenize_line(rewritten) if t.type == TokenType.COMMENT), None)
        if comment is None:
            rewritten = f"{rewritten.rstrip()}  # {LET_MARKER}"
        else:
            text = rewritten[comment.offset + 1:].strip()
            rewritten = f"{rewritten[:comment.offset]}# {LET_MARKER}; {text}"

        lines[i] = rewritten
        changes.append(FixChange(i + 1, "variable", "Replaced 'let' with 'var'"))

    return changes


def add_traits_to_header(header: str, traits: Sequence[str]) -> Optional[str]:
    """
    Insert traits into a one-line struct header.

    Returns None when the header has no recognizable shape.
    """
    masked = mask_line(header)
    span = locate_trait_list(masked)
    if span is None:
        return None
    start, end = span
    names = ", ".join(traits)

    if end is None:
        if start >= len(masked) or masked[start] != ":":
            return None
        return f"{header[:start].rstrip()}({names}){header[start:]}"

    if masked[start + 1:end - 1].strip():
        return f"{header[:end - 1].rstrip()}, {names}{header[end - 1:]}"
    return f"{header[:start + 1]}{names}{header[end - 1:]}"


def _method_extent(lines: Sequence[str], header: int) -> Optional[tuple[int, int]]:
    """(first, end) line range of a method, including decorators above it."""
    block = extract_block(lines, header)
    if block is None:
        return None
    start = header
    indent = _indent_of(lines[header])
    while start > 0 and lines[start - 1].strip().startswith("@") and _indent_of(lines[start - 1]) == indent:
        start -= 1
    return start, max(block.body_end, block.header_end + 1)


def fix_trivial_lifecycle(lines: list[str], ctx: FixContext) -> list[FixChange]:
    """Remove trivial lifecycle methods, declaring the trait where missing."""
    classifier = LineClassifier(lines, ctx.check_docstring_code)
    changes: list[FixChange] = []
    structs = find_declarations(lines, classifier, kinds={"struct"})

    # Bottom-up so deletions never shift a struct not yet processed
    for decl in reversed(structs):
        block = extract_block(lines, decl.line)
        if block is None or block.is_empty:
            continue
        suggestions = suggest_trait_changes(parse_struct_info(lines, block), analyze_lifecycle(lines, block))
        if not suggestions:
            continue

        new_header = None
        to_add = [s.trait for s in suggestions if s.add_trait]
        if to_add:
            if block.header_start == block.header_end:
                new_header = add_traits_to_header(lines[block.header_start], to_add)
            if new_header is None:
                # Removing the method without declaring the trait would break the struct
                logger.info(f"Struct '{decl.name}': header not rewritable, keeping lifecycle methods")
                suggestions = [s for s in suggestions if not s.add_trait]
                if not suggestions:
                    continue

        extents = []
        for s in suggestions:
            extent = _method_extent(lines, block.body_start + (s.method_offset or 0))
            if extent is not None:
                extents.append((extent, s))

        for (start, end), s in sorted(extents, key=lambda e: e[0][0], reverse=True):
            del lines[start:end]
            # Collapse the blank line left between neighbours
            if 0 < start and not lines[start - 1].strip() and (start == len(lines) or not lines[start].strip()):
                del lines[start - 1]
                start -= 1
            changes.append(FixChange(start + 1, "struct", f"Removed trivial {s.method} from '{decl.name}'"))

        if new_header is not None:
            lines[block.header_start] = new_header
            changes.append(FixChange(
                block.header_start + 1, "struct",
                f"Declared {', '.join(to_add)} on '{decl.name}'",
            ))

        _ensure_body(lines, block)

    return changes


def _ensure_body(lines: list[str], block: Block) -> None:
    """Insert `pass` if removing methods left a struct without statements."""
    for k in range(block.header_end + 1, len(lines)):
        line = lines[k]
        if not line.strip() or is_comment_line(line):
            continue
        if indent_width(line) > block.header_indent:
            return
        break
    indent = block.body_indent if block.body_indent is not None else block.header_indent + 4
    lines.insert(block.header_end + 1, " " * indent + "pass")


def fix_missing_docstrings(lines: list[str], ctx: FixContext) -> list[FixChange]:
    classifier = LineClassifier(lines, ctx.check_docstring_code)
    inserts: list[tuple[int, str, str]] = []

    for decl in find_declarations(lines, classifier):
        block = extract_block(lines, decl.line)
        if block is None or block.is_empty:
            continue
        first = first_statement(lines, block)
        if first is None or is_docstring_start(lines[first]):
            continue
        inserts.append((first, _indent_of(lines[first]), decl.name))

    changes: list[FixChange] = []
    for index, indent, name in sorted(inserts, reverse=True):
        lines.insert(index, indent + DOCSTRING_PLACEHOLDER.format(name=name))
        changes.append(FixChange(index + 1, "documentation", f"Added placeholder docstring to '{name}'"))

    return list(reversed(changes))


TRANSFORMS: tuple[Transform, ...] = (
    fix_relative_imports,
    fix_let_bindings,
    fix_trivial_lifecycle,
    fix_missing_docstrings,
)


# =============================================================================
# Pipeline
# =============================================================================

class AutoFixer:
    """
    Applies automatic fixes to one file at a time.

    Usage:
        fixer = AutoFixer(config)
        result = fixer.fix_file(Path("src/main.mojo"))
        if not result.success:
            print(result.message)
    """

    def __init__(
        self,
        config: Optional[CheckerConfig] = None,
        validator: Optional[BuildValidator] = None,
        backups: Optional[BackupManager] = None,
    ):
        self.config = config or CheckerConfig()
        self.validator = validator or BuildValidator(self.config.validate_command, self.config.validate_timeout)
        self.backups = backups or BackupManager(self.config.retention_days)

    def plan(self, text: str, package: Sequence[str] = ()) -> tuple[str, list[FixChange]]:
        """Apply every transform to `text` in memory."""
        ctx = FixContext(tuple(package), self.config.check_docstring_code)
        lines = split_lines(text)
        changes: list[FixChange] = []
        for transform in TRANSFORMS:
            changes.extend(transform(lines, ctx))

        if not changes:
            return text, []

        newline = line_ending(text)
        fixed = newline.join(lines)
        if text.endswith(("\n", "\r")):
            fixed += newline
        return fixed, changes

    def fix_file(self, path: Path, dry_run: bool = False) -> FixResult:
        """
        Fix one file.

        With dry_run the planned changes are returned and nothing is written.

        Raises:
            BackupError: If a rollback cannot restore the original content.
        """
        try:
            original = path.read_bytes()
            text = original.decode("utf-8")
        except OSError as e:
            return FixResult(str(path), False, message=f"Cannot read file: {e.strerror or e}")
        except UnicodeDecodeError:
            return FixResult(str(path), False, message="File is not valid UTF-8; not modified")

        fixed, changes = self.plan(text, package_parts(path, self.config.extensions))
        if not changes:
            return FixResult(str(path), True, message="No automatic fixes apply")
        if dry_run:
            return FixResult(str(path), True, changes, message=f"{len(changes)} fixes available (dry run)")

        backup_path: Optional[Path] = None
        if self.config.enable_backup:
            try:
                backup_path = self.backups.create(path)
            except BackupError as e:
                logger.error(str(e))
                return FixResult(str(path), False, changes, message=f"{e}; file not modified")

        result = FixResult(str(path), False, changes, backup_path=str(backup_path) if backup_path else None)

        try:
            path.write_bytes(fixed.encode("utf-8"))
        except OSError as e:
            self._restore(path, original, backup_path)
            result.rolled_back = True
            result.message = f"Write failed ({e.strerror or e}); original content restored"
            return result

        result.applied = True
        result.validation = self.validator.validate(path)

        if result.validation.status == ValidationStatus.FAILED:
            self._restore(path, original, backup_path)
            result.applied = False
            result.rolled_back = True
            result.message = "Build validation failed; original content restored"
            return result

        result.success = True
        if result.validation.status == ValidationStatus.SKIPPED:
            result.message = f"Applied {len(changes)} fixes; build validation skipped"
            return result

        result.message = f"Applied {len(changes)} fixes; build validation passed"
        if backup_path is not None and self.config.auto_cleanup and not self.config.keep_backups:
            self.backups.remove(path)
            result.backup_path = None
        return result

    def rollback(self, path: Path) -> None:
        """Restore `path` from its backup file."""
        self.backups.restore(path)

    def _restore(self, path: Path, original: bytes, backup_path: Optional[Path]) -> None:
        if backup_path is not None:
            self.backups.restore(path)
            return
        try:
            path.write_bytes(original)
        except OSError as e:
            raise BackupError(f"Failed to restore {path} from memory: {e}", path) from e
        logger.info(f"Restored {path} from in-memory snapshot")

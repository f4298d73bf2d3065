"""
File discovery and source loading.

Handles:
- Recursive directory walking with an explicit exclusion set
- Deterministic ordering of the discovered files
- Source file loading
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .config import CheckerConfig
from .parser.lines import split_lines


@dataclass(frozen=True)
class SourceFile:
    """A loaded source file with content."""
    path: Path
    text: str
    lines: list[str]


def load_source(path: Path) -> SourceFile:
    """
    Load a single source file.

    Raises:
        OSError: If the file cannot be read.
    """
    text = path.read_text(encoding="utf-8", errors="replace")
    return SourceFile(path=path, text=text, lines=split_lines(text))


def should_exclude_path(cfg: CheckerConfig, root: Path, path: Path) -> bool:
    """Check if any directory between root and path is excluded."""
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        parts = path.parts[:-1]
    return any(p in cfg.exclude_dirs for p in parts)


def is_source_file(cfg: CheckerConfig, path: Path) -> bool:
    return path.suffix in cfg.extensions


def iter_files(root: Path, cfg: CheckerConfig) -> Iterator[Path]:
    """Iterate over candidate source files under root, in no particular order."""
    for path in root.rglob("*"):
        if not path.is_file():
            continue
        if should_exclude_path(cfg, root, path):
            continue
        if is_source_file(cfg, path):
            yield path


def discover_files(root: Path, cfg: Optional[CheckerConfig] = None) -> list[Path]:
    """
    All source files under root, sorted by their root-relative POSIX path.

    Sorting on the relative path keeps the order identical across
    machines and checkouts.
    """
    cfg = cfg or CheckerConfig()
    if root.is_file():
        return [root] if is_source_file(cfg, root) else []
    return sorted(iter_files(root, cfg), key=lambda p: p.relative_to(root).as_posix())

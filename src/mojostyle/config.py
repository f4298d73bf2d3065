"""
Checker configuration.

Loads configuration from a YAML file and environment variables into an
immutable CheckerConfig. Command-line flags are layered on top with
dataclasses.replace(), so detectors and the scorer only ever see a frozen
object.
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


# Configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path(".mojostyle.yaml"),
    Path.home() / ".mojostyle" / "config.yaml",
]

DEFAULT_EXCLUDE_DIRS = frozenset({
    ".git",
    ".magic",
    ".pixi",
    ".venv",
    "venv",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    "node_modules",
    "build",
    "dist",
})


@dataclass(frozen=True)
class CheckerConfig:
    """Runtime configuration passed to every detector and to the fixer."""

    # Output
    show_observations: bool = False

    # Line classification: when True, code inside docstrings is checked too
    check_docstring_code: bool = False

    # Backup lifecycle
    enable_backup: bool = True
    keep_backups: bool = False
    auto_cleanup: bool = False
    retention_days: int = 7

    # Directory walking
    exclude_dirs: frozenset[str] = DEFAULT_EXCLUDE_DIRS
    extensions: tuple[str, ...] = (".mojo", ".🔥")

    # Documentation quality
    min_docstring_length: int = 10

    # Post-fix validation. "{file}" and "{output}" are substituted; without
    # a "{file}" placeholder the file path is appended.
    validate_command: tuple[str, ...] = ("mojo", "build", "{file}", "-o", "{output}")
    validate_timeout: float = 120.0

    def with_overrides(self, **overrides: Any) -> "CheckerConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


# Expected python type per field, for validating YAML values
_FIELD_TYPES: dict[str, type] = {
    "show_observations": bool,
    "check_docstring_code": bool,
    "enable_backup": bool,
    "keep_backups": bool,
    "auto_cleanup": bool,
    "retention_days": int,
    "exclude_dirs": frozenset,
    "extensions": tuple,
    "min_docstring_length": int,
    "validate_command": tuple,
    "validate_timeout": float,
}


def _coerce(key: str, value: Any) -> Any:
    """Convert a YAML value to the field's type, raising ConfigError on mismatch."""
    expected = _FIELD_TYPES[key]

    if expected is bool:
        if not isinstance(value, bool):
            raise ConfigError(f"'{key}' must be true or false, got {value!r}")
        return value

    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"'{key}' must be an integer, got {value!r}")
        if value < 0:
            raise ConfigError(f"'{key}' must not be negative, got {value!r}")
        return value

    if expected is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"'{key}' must be a number, got {value!r}")
        return float(value)

    # Sequences: accept a list, or a single string for the command
    if isinstance(value, str):
        value = shlex.split(value) if key == "validate_command" else [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return frozenset(value) if expected is frozenset else tuple(value)


def config_from_mapping(data: dict[str, Any], base: Optional[CheckerConfig] = None) -> CheckerConfig:
    """Build a config from a plain mapping (as read from YAML)."""
    base = base or CheckerConfig()
    known = {f.name for f in fields(CheckerConfig)}
    changes: dict[str, Any] = {}

    for key, value in data.items():
        key = str(key).replace("-", "_")
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        changes[key] = _coerce(key, value)

    return replace(base, **changes)


def _apply_env_overrides(cfg: CheckerConfig) -> CheckerConfig:
    """Apply environment variable overrides."""
    changes: dict[str, Any] = {}

    days = os.environ.get("MOJOSTYLE_RETENTION_DAYS")
    if days:
        try:
            changes["retention_days"] = _coerce("retention_days", int(days))
        except ValueError:
            raise ConfigError(f"MOJOSTYLE_RETENTION_DAYS must be an integer, got {days!r}")

    command = os.environ.get("MOJOSTYLE_VALIDATE_COMMAND")
    if command:
        changes["validate_command"] = _coerce("validate_command", command)

    return replace(cfg, **changes) if changes else cfg


def load_config(config_path: Optional[Path] = None) -> CheckerConfig:
    """
    Load configuration from YAML and the environment.

    An explicit path must exist. Without one, the search paths are tried
    in order and defaults are used when none is found.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or has bad values.
    """
    if config_path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    search_paths = [config_path] if config_path else CONFIG_SEARCH_PATHS
    cfg = CheckerConfig()

    for path in search_paths:
        if not path.exists():
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__}")

        cfg = config_from_mapping(data, cfg)
        logger.debug(f"Loaded config from {path}")
        break

    return _apply_env_overrides(cfg)

"""
Backup files for the auto-fixer.

A backup is a plain sibling copy named `<original>.backup`. Backups are
written and fsync'd before a file is transformed, restored on failed
validation, and removed by cleanup once older than the retention window.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from pathlib import Path
from typing import Optional

from ..errors import BackupError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"
SECONDS_PER_DAY = 86400


def backup_path_for(path: Path) -> Path:
    """`foo.mojo` -> `foo.mojo.backup`"""
    return path.with_name(path.name + BACKUP_SUFFIX)


def _write_durable(path: Path, data: bytes) -> None:
    """Write bytes via a temp file, fsync, then atomically replace."""
    tmp = path.with_name(path.name + ".tmp")
    with open(tmp, "wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp, path)


class BackupManager:
    """Creates, restores and prunes `.backup` files."""

    def __init__(self, retention_days: int = 7):
        self.retention_days = retention_days

    def create(self, path: Path) -> Path:
        """
        Copy `path` to its backup and make the copy durable.

        Raises:
            BackupError: If the original cannot be read or the backup written.
        """
        backup = backup_path_for(path)
        try:
            data = path.read_bytes()
            _write_durable(backup, data)
            shutil.copymode(path, backup)
        except OSError as e:
            raise BackupError(f"Failed to back up {path}: {e}", path) from e

        logger.info(f"Backed up {path} -> {backup.name}")
        return backup

    def restore(self, path: Path) -> None:
        """
        Restore `path` byte-for-byte from its backup.

        Raises:
            BackupError: If there is no backup or it cannot be copied back.
        """
        backup = backup_path_for(path)
        if not backup.is_file():
            raise BackupError(f"No backup found for {path}", path)
        try:
            _write_durable(path, backup.read_bytes())
        except OSError as e:
            raise BackupError(f"Failed to restore {path} from {backup.name}: {e}", path) from e

        logger.info(f"Restored {path} from {backup.name}")

    def remove(self, path: Path) -> bool:
        """Delete the backup of `path`. Returns True if one was removed."""
        backup = backup_path_for(path)
        if not backup.is_file():
            return False
        backup.unlink()
        logger.debug(f"Removed backup {backup}")
        return True

    def find_backups(self, root: Path) -> list[Path]:
        """All backup files under root, sorted."""
        if root.is_file():
            return [root] if root.name.endswith(BACKUP_SUFFIX) else []
        return sorted(p for p in root.rglob(f"*{BACKUP_SUFFIX}") if p.is_file())

    def cleanup(self, root: Path, retention_days: Optional[int] = None, now: Optional[float] = None) -> list[Path]:
        """
        Delete backups under root older than the retention window.

        A retention of 0 days removes every backup.

        Returns:
            The backups that were removed.
        """
        days = self.retention_days if retention_days is None else retention_days
        cutoff = (now if now is not None else time.time()) - days * SECONDS_PER_DAY

        removed: list[Path] = []
        for backup in self.find_backups(root):
            try:
                if days > 0 and backup.stat().st_mtime > cutoff:
                    continue
                backup.unlink()
            except OSError as e:
                logger.warning(f"Could not remove {backup}: {e}")
                continue
            removed.append(backup)

        logger.info(f"Removed {len(removed)} backups older than {days} days under {root}")
        return removed

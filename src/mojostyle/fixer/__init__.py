"""
mojostyle.fixer - automatic fixes with backup, build validation and rollback
"""

from mojostyle.fixer.autofix import AutoFixer, FixChange, FixResult
from mojostyle.fixer.backup import BackupManager, backup_path_for
from mojostyle.fixer.validation import BuildValidator, ValidationResult, ValidationStatus

__all__ = [
    "AutoFixer",
    "FixChange",
    "FixResult",
    "BackupManager",
    "backup_path_for",
    "BuildValidator",
    "ValidationResult",
    "ValidationStatus",
]

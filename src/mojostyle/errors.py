"""
Exception types raised by mojostyle.

File-access failures while scanning are never raised; they become
FILE_ACCESS violations (see checker.py).
"""


class MojostyleError(Exception):
    """Base class for mojostyle errors."""
    pass


class ConfigError(MojostyleError):
    """Raised when a configuration file cannot be loaded or is invalid."""
    pass


class BackupError(MojostyleError):
    """Raised when a backup cannot be created or restored."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)

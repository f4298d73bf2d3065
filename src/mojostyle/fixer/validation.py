"""
Post-fix build validation.

Runs the configured build command against a fixed file. The command is a
template: "{file}" becomes the file path and "{output}" a throwaway
artifact path in a temporary directory.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


class ValidationStatus(Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ValidationResult:
    status: ValidationStatus
    command: tuple[str, ...] = ()
    returncode: Optional[int] = None
    output: str = ""

    @property
    def passed(self) -> bool:
        return self.status == ValidationStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == ValidationStatus.FAILED


def build_command(template: Sequence[str], path: Path, output: Path) -> tuple[str, ...]:
    """Substitute placeholders; append the file if the template names none."""
    command = [arg.replace("{file}", str(path)).replace("{output}", str(output)) for arg in template]
    if not any("{file}" in arg for arg in template):
        command.append(str(path))
    return tuple(command)


class BuildValidator:
    """Checks that a file still builds after it has been rewritten."""

    def __init__(self, command: Sequence[str] = ("mojo", "build", "{file}", "-o", "{output}"), timeout: float = 120.0):
        self.command = tuple(command)
        self.timeout = timeout

    def validate(self, path: Path) -> ValidationResult:
        if not self.command:
            return ValidationResult(ValidationStatus.SKIPPED, output="no validate command configured")

        with tempfile.TemporaryDirectory(prefix="mojostyle-") as tmp:
            command = build_command(self.command, path, Path(tmp) / path.stem)
            logger.debug(f"Validating with: {' '.join(command)}")
            try:
                proc = subprocess.run(
                    list(command),
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    cwd=str(path.parent),
                )
            except FileNotFoundError:
                logger.warning(f"Validator '{command[0]}' not found; skipping build validation")
                return ValidationResult(ValidationStatus.SKIPPED, command, output=f"{command[0]} not found")
            except subprocess.TimeoutExpired:
                logger.warning(f"Validation of {path} timed out after {self.timeout}s")
                return ValidationResult(ValidationStatus.FAILED, command, output=f"timed out after {self.timeout}s")

        output = (proc.stdout + proc.stderr).strip()
        if proc.returncode != 0:
            logger.warning(f"Validation of {path} failed with exit code {proc.returncode}")
            return ValidationResult(ValidationStatus.FAILED, command, proc.returncode, output)

        return ValidationResult(ValidationStatus.PASSED, command, proc.returncode, output)

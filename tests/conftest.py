"""
Pytest configuration and shared fixtures.
"""

import sys
import textwrap
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mojostyle.config import CheckerConfig
from mojostyle.fixer.validation import ValidationResult, ValidationStatus


def dedent(source: str) -> str:
    """Strip the common indentation and the leading newline of a test snippet."""
    return textwrap.dedent(source).lstrip("\n")


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def config():
    """Default configuration."""
    return CheckerConfig()


@pytest.fixture
def observing_config():
    """Configuration that reports observations."""
    return CheckerConfig(show_observations=True)


# =============================================================================
# FILESYSTEM FIXTURES
# =============================================================================

@pytest.fixture
def write_source(tmp_path):
    """Write a dedented Mojo snippet under tmp_path and return its path."""
    def _write(relpath: str, source: str) -> Path:
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(source), encoding="utf-8")
        return path
    return _write


# =============================================================================
# VALIDATOR FAKES
# =============================================================================

class FakeValidator:
    """Stands in for the build command; records what it was asked to check."""

    def __init__(self, status: ValidationStatus = ValidationStatus.PASSED):
        self.status = status
        self.calls = []

    def validate(self, path):
        self.calls.append(path)
        return ValidationResult(self.status, ("fake-build", str(path)), 0, "")


@pytest.fixture
def passing_validator():
    return FakeValidator(ValidationStatus.PASSED)


@pytest.fixture
def failing_validator():
    return FakeValidator(ValidationStatus.FAILED)

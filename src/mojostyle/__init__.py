"""
mojostyle - Mojo style and design-pattern compliance checker

Scans Mojo sources for violations of the style standard, scores each
file from 0 to 100, and can apply a small set of safe automatic fixes.
"""

__version__ = "0.1.0"
__author__ = "mojostyle contributors"

from mojostyle.checker import ComplianceChecker, check_file, scan_directory
from mojostyle.config import CheckerConfig, load_config
from mojostyle.models import Category, ComplianceReport, Severity, Violation

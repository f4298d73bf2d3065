"""
mojostyle.rules - pattern detectors

Each detector is a pure function (text, path, config) -> list[Violation].
Detectors are independent of each other and run in the order listed in
ALL_DETECTORS.
"""

from mojostyle.rules.base import Detector, SourceContext
from mojostyle.rules.docs import check_docs
from mojostyle.rules.error_handling import check_error_handling
from mojostyle.rules.gpu import check_gpu
from mojostyle.rules.imports import check_imports
from mojostyle.rules.memory import check_memory
from mojostyle.rules.performance import check_performance
from mojostyle.rules.structs import check_structs
from mojostyle.rules.variables import check_variables

ALL_DETECTORS: tuple[Detector, ...] = (
    check_imports,
    check_structs,
    check_variables,
    check_gpu,
    check_docs,
    check_error_handling,
    check_performance,
    check_memory,
)

__all__ = [
    "ALL_DETECTORS",
    "Detector",
    "SourceContext",
    "check_docs",
    "check_error_handling",
    "check_gpu",
    "check_imports",
    "check_memory",
    "check_performance",
    "check_structs",
    "check_variables",
]

"""
mojostyle.analysis - struct lifecycle, trait correspondence, docstring quality
"""

from mojostyle.analysis.docstrings import (
    DocstringAssessment,
    DocstringQuality,
    assess_docstring,
)
from mojostyle.analysis.lifecycle import (
    LifecycleAnalysis,
    StructInfo,
    analyze_lifecycle,
    parse_struct_info,
)
from mojostyle.analysis.traits import TraitSuggestion, suggest_trait_changes

__all__ = [
    "DocstringAssessment",
    "DocstringQuality",
    "assess_docstring",
    "LifecycleAnalysis",
    "StructInfo",
    "analyze_lifecycle",
    "parse_struct_info",
    "TraitSuggestion",
    "suggest_trait_changes",
]

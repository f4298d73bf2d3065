"""
Trait correspondence.

Combines StructInfo (declared traits) with LifecycleAnalysis (trivial
methods) into recommendations:

| declared traits | trivial methods present | outcome                                  |
|-----------------|-------------------------|------------------------------------------|
| both            | either trivial          | remove the trivial method(s)             |
| copy only       | trivial move            | add Movable, remove __moveinit__         |
| move only       | trivial copy            | add Copyable, remove __copyinit__        |
| neither         | both trivial            | add both traits, remove both methods     |
| neither         | one trivial             | add that trait, remove that method       |
| any             | none trivial            | nothing                                  |

Every recommendation is backed by a trivial method. A trait is never
suggested for removal: a missing trivial method is not evidence that a
trait is unused, since collections and external callers may rely on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .lifecycle import COPY_METHOD, MOVE_METHOD, LifecycleAnalysis, StructInfo

COPY_TRAIT = "Copyable"
MOVE_TRAIT = "Movable"


@dataclass(frozen=True)
class TraitSuggestion:
    """One recommendation, tied to one trivial lifecycle method."""
    struct_name: str
    method: str                     # "__copyinit__" or "__moveinit__"
    trait: str                      # "Copyable" or "Movable"
    add_trait: bool                 # False: trait already declared
    method_offset: Optional[int]    # offset of the method header in the struct body

    @property
    def message(self) -> str:
        if self.add_trait:
            return (
                f"Struct '{self.struct_name}' has a trivial {self.method}; "
                f"declare the {self.trait} trait and let the compiler synthesize it"
            )
        return (
            f"Struct '{self.struct_name}' already declares {self.trait}; "
            f"its trivial {self.method} is redundant"
        )

    @property
    def remedy(self) -> str:
        if self.add_trait:
            return f"Add {self.trait} to the struct's trait list and remove {self.method}"
        return f"Remove {self.method}"


def suggest_trait_changes(info: StructInfo, analysis: LifecycleAnalysis) -> list[TraitSuggestion]:
    """Apply the decision table to one struct; copy before move."""
    suggestions: list[TraitSuggestion] = []

    if analysis.trivial_copy:
        suggestions.append(TraitSuggestion(
            struct_name=info.name,
            method=COPY_METHOD,
            trait=COPY_TRAIT,
            add_trait=not info.has_copy_trait,
            method_offset=analysis.copy_line,
        ))

    if analysis.trivial_move:
        suggestions.append(TraitSuggestion(
            struct_name=info.name,
            method=MOVE_METHOD,
            trait=MOVE_TRAIT,
            add_trait=not info.has_move_trait,
            method_offset=analysis.move_line,
        ))

    return suggestions

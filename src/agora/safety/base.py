"""
Shared result types for the content safety filter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

# Synthetic match tag for phrase-pattern hits
HARMFUL_PHRASE = "harmful_phrase"


class LabeledText(NamedTuple):
    """One user-authored field, labeled the way the rejection message names it."""

    label: str
    value: str


@dataclass(frozen=True)
class ModerationMatch:
    """Result of evaluating one piece of text."""

    blocked: bool
    matches: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_matches(cls, matches: set[str] | frozenset[str]) -> "ModerationMatch":
        frozen = frozenset(matches)
        return cls(blocked=bool(frozen), matches=frozen)

    def sorted_matches(self) -> list[str]:
        return sorted(self.matches)


@dataclass(frozen=True)
class Violation:
    """The first blocked field of a write."""

    field: str
    matches: frozenset[str]

    def sorted_matches(self) -> list[str]:
        return sorted(self.matches)

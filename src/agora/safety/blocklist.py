"""
Static moderation data: blocked terms, phrase patterns and the leetspeak map.

Loaded once per process and shared by reference. Nothing here is mutated
after import.
"""

from __future__ import annotations

import re
from types import MappingProxyType

# Symbol/digit -> letter substitutions applied after lower-casing
LEET_MAP = MappingProxyType(
    {
        "@": "a",
        "4": "a",
        "8": "b",
        "3": "e",
        "1": "i",
        "!": "i",
        "|": "i",
        "0": "o",
        "5": "s",
        "$": "s",
        "7": "t",
        "2": "z",
    }
)

LEET_TABLE = str.maketrans(dict(LEET_MAP))

# Order matters only for reporting; matching treats this as a set
BLOCKED_TERMS: tuple[str, ...] = (
    "asshole",
    "bastard",
    "bitch",
    "bullshit",
    "crap",
    "cunt",
    "damn",
    "dick",
    "dumbass",
    "faggot",
    "fuck",
    "motherfucker",
    "nigga",
    "nigger",
    "pedo",
    "pedophile",
    "porn",
    "pussy",
    "rapist",
    "retard",
    "shit",
    "slut",
    "whore",
    "cock",
    "cum",
    "fucking",
    "fucked",
    "fucker",
    "fuk",
    "fk",
    "kys",
    "nazi",
    "hitler",
    "incest",
    "anal",
    "blowjob",
    "dildo",
    "sex",
)

BLOCKED_TERM_SET: frozenset[str] = frozenset(BLOCKED_TERMS)

# Near-match (one edit) only applies to terms at least this long
FUZZY_MIN_LENGTH = 5
# Compacted-token and joined-stream containment only apply to terms at least this long
CONTAINMENT_MIN_LENGTH = 4

FUZZY_TERMS: tuple[str, ...] = tuple(
    t for t in BLOCKED_TERMS if len(t) >= FUZZY_MIN_LENGTH
)
CONTAINMENT_TERMS: tuple[str, ...] = tuple(
    t for t in BLOCKED_TERMS if len(t) >= CONTAINMENT_MIN_LENGTH
)

# Self-harm incitement and hate slogans, matched on normalized text
BLOCKED_PHRASE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bkill\s+yourself\b",
        r"\bgo\s+die\b",
        r"\bkys\b",
        r"\bhang\s+yourself\b",
        r"\brape\s+yourself\b",
        r"\bheil\s+hitler\b",
    )
)

"""
Text normalization used by the content filter.

Every pattern here is a single character class or a back-reference to one
character, so matching stays linear in the input length.
"""

from __future__ import annotations

import re
import unicodedata

from agora.safety.blocklist import LEET_TABLE

_INVISIBLE_RE = re.compile("[\u200b-\u200f\u2060\ufeff]")
_COMBINING_MARK_RE = re.compile("[\u0300-\u036f]")
_STYLISTIC_RE = re.compile(r"[_~`*^]+")
_NON_ALNUM_RE = re.compile(r"[^0-9a-z\s]")
_TRIPLE_REPEAT_RE = re.compile(r"([a-z])\1{2,}")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_LETTER_RE = re.compile(r"[^a-z]+")
_REPEAT_RUN_RE = re.compile(r"(.)\1+")


def normalize_text(value: str) -> str:
    """
    Fold text into lower-case ASCII letters, digits and spaces.

    NFKD-decompose, drop zero-width/formatting characters and combining
    marks, lower-case, undo leetspeak, drop stylistic punctuation, then turn
    every other symbol into a space.
    """
    text = unicodedata.normalize("NFKD", value)
    text = _INVISIBLE_RE.sub("", text)
    text = _COMBINING_MARK_RE.sub("", text)
    text = text.lower().translate(LEET_TABLE)
    text = _STYLISTIC_RE.sub("", text)
    return _NON_ALNUM_RE.sub(" ", text)


def collapse_repeating_chars(value: str) -> str:
    """Collapse runs of three or more identical letters down to two."""
    return _TRIPLE_REPEAT_RE.sub(r"\1\1", value)


def canonicalize(value: str) -> str:
    """Normalize, collapse repeats, then squeeze whitespace."""
    collapsed = collapse_repeating_chars(normalize_text(value))
    return _WHITESPACE_RE.sub(" ", collapsed).strip()


def split_letters(value: str) -> list[str]:
    """Split on non-letter runs, dropping empty pieces."""
    return [piece for piece in _NON_LETTER_RE.split(value) if piece]


def letters_only(value: str) -> str:
    return _NON_LETTER_RE.sub("", value)


def compact_token(token: str) -> str:
    """Squeeze every run of a repeated character down to one."""
    return _REPEAT_RUN_RE.sub(r"\1", token)


def is_within_one_edit(a: str, b: str) -> bool:
    """
    Approximate "at most one insertion, deletion or substitution".

    A bounded two-pointer scan rather than a full edit-distance table. On a
    mismatch it always advances the pointer into the longer string, so some
    boundary cases differ from true Levenshtein distance; callers rely on
    exactly this behavior.
    """
    if abs(len(a) - len(b)) > 1:
        return False

    i = 0
    j = 0
    edits = 0

    while i < len(a) and j < len(b):
        if a[i] == b[j]:
            i += 1
            j += 1
            continue

        edits += 1
        if edits > 1:
            return False

        if len(a) > len(b):
            i += 1
        elif len(b) > len(a):
            j += 1
        else:
            i += 1
            j += 1

    if i < len(a) or j < len(b):
        edits += 1

    return edits <= 1

"""
Blocklist-based content safety filter for user-authored text.

Runs synchronously on every write path (posts, comments, messages) before
anything is stored. The passes are layered because each one alone is
defeated by a different evasion trick:

1. Phrase patterns on normalized text (self-harm incitement, hate slogans)
2. Exact and one-edit token matches ("sh1t", "bitchh")
3. Compacted tokens ("shiiiiit")
4. Containment in the joined token/letter stream ("s.h.i.t", "s h i t")
5. Spaced initialisms ("k y s")

Limitations:
- English-only blocklist
- Containment passes can flag innocent words that embed a blocked term
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from agora.config import get_settings
from agora.errors import ValidationRejected
from agora.logging import get_logger
from agora.safety.base import HARMFUL_PHRASE, ModerationMatch, Violation
from agora.safety.blocklist import (
    BLOCKED_PHRASE_PATTERNS,
    BLOCKED_TERM_SET,
    BLOCKED_TERMS,
    CONTAINMENT_TERMS,
    FUZZY_TERMS,
)
from agora.safety.normalize import (
    canonicalize,
    compact_token,
    is_within_one_edit,
    letters_only,
    split_letters,
)

logger = get_logger(__name__)


def _labeled_pair(item: Any) -> tuple[str, Any] | None:
    """
    Read one `{label, value}` field.

    Accepts 2-tuples (including `LabeledText`), mappings with `label` and
    `value` keys, and objects with `label` and `value` attributes. Anything
    else yields None and is treated as clean.
    """
    if isinstance(item, tuple):
        if len(item) != 2:
            return None
        label, value = item
    elif isinstance(item, Mapping):
        if "value" not in item:
            return None
        label, value = item.get("label"), item["value"]
    elif hasattr(item, "label") and hasattr(item, "value"):
        label, value = item.label, item.value
    else:
        return None
    return (label if isinstance(label, str) else ""), value


class ContentSafetyFilter:
    """
    Deterministic, side-effect-free text filter.

    Instances share the module-level blocklists by reference; the only
    per-instance state is whether `ensure_allowed` enforces its verdict.
    """

    def __init__(self, enforce: bool | None = None):
        self.enforce = get_settings().moderation_enabled if enforce is None else enforce
        self._phrase_patterns = BLOCKED_PHRASE_PATTERNS
        self._terms = BLOCKED_TERMS
        self._term_set = BLOCKED_TERM_SET
        self._fuzzy_terms = FUZZY_TERMS
        self._containment_terms = CONTAINMENT_TERMS
        self._containment_set = frozenset(CONTAINMENT_TERMS)

    @property
    def name(self) -> str:
        return "blocklist_filter"

    def detect(self, text: Any) -> ModerationMatch:
        """
        Evaluate one piece of text.

        Never raises: anything that is not a non-blank string is treated as
        clean.
        """
        if not isinstance(text, str) or not text.strip():
            return ModerationMatch(blocked=False)

        normalized = canonicalize(text)
        matches: set[str] = set()

        for pattern in self._phrase_patterns:
            if pattern.search(normalized):
                matches.add(HARMFUL_PHRASE)
                break

        pieces = split_letters(normalized)
        tokens = [piece for piece in pieces if len(piece) > 1]
        initialism = "".join(piece for piece in pieces if len(piece) == 1)

        for token in tokens:
            if token in self._term_set:
                matches.add(token)
            for term in self._fuzzy_terms:
                if term not in matches and is_within_one_edit(token, term):
                    matches.add(term)

        for token in tokens:
            compacted = compact_token(token)
            if compacted in self._containment_set:
                matches.add(compacted)

        joined = "".join(tokens)
        alpha_stream = letters_only(normalized)
        for term in self._containment_terms:
            if term in alpha_stream or term in joined:
                matches.add(term)

        if initialism:
            for term in self._terms:
                if term in initialism:
                    matches.add(term)

        return ModerationMatch.from_matches(matches)

    def check(self, fields: Iterable[Any]) -> Violation | None:
        """
        Return the first blocked field, in caller order, or None.

        Malformed fields and non-iterable input are skipped rather than
        raising.
        """
        if not isinstance(fields, Iterable) or isinstance(fields, (str, bytes)):
            return None
        for item in fields:
            pair = _labeled_pair(item)
            if pair is None:
                continue
            label, value = pair
            result = self.detect(value)
            if result.blocked:
                return Violation(field=label, matches=result.matches)
        return None

    def ensure_allowed(self, fields: Iterable[Any]) -> None:
        """
        Gate a write path.

        Raises:
            ValidationRejected: for the first blocked field
        """
        violation = self.check(fields)
        if violation is None:
            return

        if not self.enforce:
            logger.info(
                "moderation_not_enforced",
                field=violation.field,
                match_count=len(violation.matches),
            )
            return

        logger.info(
            "moderation_blocked",
            field=violation.field,
            match_count=len(violation.matches),
        )
        raise ValidationRejected(violation.field, violation.matches)


_content_filter: ContentSafetyFilter | None = None


def get_content_filter() -> ContentSafetyFilter:
    """Get the process-wide content filter."""
    global _content_filter
    if _content_filter is None:
        _content_filter = ContentSafetyFilter()
    return _content_filter


def detect_inappropriate_language(text: Any) -> ModerationMatch:
    """Evaluate one piece of text with the process-wide filter."""
    return get_content_filter().detect(text)


def find_moderation_violation(fields: Iterable[Any]) -> Violation | None:
    """Return the first blocked field with the process-wide filter."""
    return get_content_filter().check(fields)

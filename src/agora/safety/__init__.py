"""
Content safety filtering for user-authored text.

A single deterministic, linear-time filter layered from several cheap
passes (phrase patterns, exact/near token match, compacted tokens, joined
stream containment, spaced initialisms). No external calls.
"""

from agora.errors import moderation_message
from agora.safety.base import HARMFUL_PHRASE, LabeledText, ModerationMatch, Violation
from agora.safety.fields import CommentFields, MessageFields, PostFields
from agora.safety.filter import (
    ContentSafetyFilter,
    detect_inappropriate_language,
    find_moderation_violation,
    get_content_filter,
)

__all__ = [
    # Result types
    "HARMFUL_PHRASE",
    "LabeledText",
    "ModerationMatch",
    "Violation",
    # Input structs
    "CommentFields",
    "MessageFields",
    "PostFields",
    # Filter
    "ContentSafetyFilter",
    "detect_inappropriate_language",
    "find_moderation_violation",
    "get_content_filter",
    "moderation_message",
]

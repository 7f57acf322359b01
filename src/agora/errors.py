"""
Error hierarchy for the trust and disclosure core.

Every error carries a stable code, a category and the HTTP status the API
layer maps it to. Domain errors are recoverable by the caller (edit and
resubmit, refresh UI state); StorageFailure is opaque and propagated as-is.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""

    VALIDATION = "validation"
    STATE = "state"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"


def moderation_message(field: str) -> str:
    """User-facing message for a field rejected by the content filter."""
    normalized = (field or "").strip().lower()
    label = normalized[:1].upper() + normalized[1:] if normalized else "Content"
    return f"{label} contains inappropriate language. Please revise and try again."


class AgoraError(Exception):
    """Base exception for all Agora errors."""

    code = "AGORA_ERROR"
    category = ErrorCategory.STORAGE
    http_status = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict[str, Any]:
        """Convert to the REST error envelope."""
        return {
            "message": self.message,
            "error": {
                "code": self.code,
                "category": self.category.value,
                "details": self.details,
            },
        }


class ValidationRejected(AgoraError):
    """User-authored text was blocked by the content filter."""

    code = "VALIDATION_REJECTED"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(self, field: str, matches: frozenset[str] | set[str]):
        super().__init__(moderation_message(field), field=field)
        self.field = field
        self.matches = frozenset(matches)


class InvalidState(AgoraError):
    """The requested transition does not match the current state."""

    code = "INVALID_STATE"
    category = ErrorCategory.STATE
    http_status = 400


class NotParticipant(AgoraError):
    """The caller is not a participant of the conversation."""

    code = "NOT_PARTICIPANT"
    category = ErrorCategory.AUTHORIZATION
    http_status = 403

    def __init__(self, conversation_id: str, user_id: str):
        super().__init__(
            "Not a participant in this conversation",
            conversation_id=conversation_id,
        )
        self.conversation_id = conversation_id
        self.user_id = user_id


class ConversationNotFound(AgoraError):
    """No conversation exists with the given id."""

    code = "CONVERSATION_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(self, conversation_id: str):
        super().__init__("Conversation not found", conversation_id=conversation_id)
        self.conversation_id = conversation_id


class StorageFailure(AgoraError):
    """Raised by persistence collaborators. Never retried by the core."""

    code = "STORAGE_FAILURE"
    category = ErrorCategory.STORAGE
    http_status = 503


class InvalidInput(AgoraError):
    """A request payload is structurally unusable (blank text, self-targeting)."""

    code = "INVALID_INPUT"
    category = ErrorCategory.VALIDATION
    http_status = 400


class UserNotFound(AgoraError):
    """No user exists with the given id."""

    code = "USER_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(self, user_id: str):
        super().__init__("User not found", user_id=user_id)
        self.user_id = user_id

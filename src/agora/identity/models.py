"""
Identity and disclosure data types.

UserIdentity is owned by the profile collaborator and read-only here.
DisclosurePresentation is computed per render and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class VisibilityLevel(str, Enum):
    """A user's standing public disclosure preference."""

    ANONYMOUS = "anonymous"  # Alias only
    ROLE = "role"  # Alias + role
    SCHOOL = "school"  # Alias + role + school/graduation year
    REAL_NAME = "realName"  # Everything, including real name

    @classmethod
    def parse(cls, value: Any) -> "VisibilityLevel":
        """Map any stored value to a level; unrecognized values become ANONYMOUS."""
        if isinstance(value, cls):
            return value
        for level in cls:
            if value == level.value:
                return level
        return cls.ANONYMOUS


class MessageKind(str, Enum):
    """Kinds of conversation messages."""

    TEXT = "text"
    IDENTITY_REQUEST = "identity-request"
    IDENTITY_ACCEPTED = "identity-accepted"
    IDENTITY_DECLINED = "identity-declined"

    @classmethod
    def parse(cls, value: Any) -> "MessageKind":
        if isinstance(value, cls):
            return value
        for kind in cls:
            if value == kind.value:
                return kind
        return cls.TEXT


class UserIdentity(BaseModel):
    """
    Disclosure-relevant attributes of one account.

    `alias` is the stable pseudonym and is always present. `real_name` may
    be missing even at REAL_NAME visibility, in which case only the alias
    is ever shown.
    """

    user_id: str = Field(..., description="Account id")
    alias: str = Field(..., min_length=1, description="Stable pseudonym")
    real_name: Optional[str] = Field(default=None, description="Legal/display name")
    visibility_level: VisibilityLevel = Field(
        default=VisibilityLevel.ANONYMOUS,
        description="Public disclosure preference",
    )
    fields_of_interest: list[str] = Field(
        default_factory=list, description="Interests; the first one is the role"
    )
    school: Optional[str] = Field(default=None, description="University")
    graduation_year: Optional[int] = Field(default=None, description="Graduation year")

    @field_validator("visibility_level", mode="before")
    @classmethod
    def _normalize_visibility(cls, value: Any) -> VisibilityLevel:
        return VisibilityLevel.parse(value)

    @property
    def role(self) -> str | None:
        return self.fields_of_interest[0] if self.fields_of_interest else None

    @property
    def trimmed_real_name(self) -> str | None:
        if self.real_name is None:
            return None
        return self.real_name.strip() or None


@dataclass(frozen=True)
class DisclosurePresentation:
    """What a display layer may render for one identity in one context."""

    display_name: str
    is_anonymous: bool
    visibility_level: VisibilityLevel
    real_name: str | None = None
    role: str | None = None
    school: str | None = None
    graduation_year: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "displayName": self.display_name,
            "realName": self.real_name,
            "visibilityLevel": self.visibility_level.value,
            "role": self.role,
            "school": self.school,
            "graduationYear": self.graduation_year,
            "isAnonymous": self.is_anonymous,
        }

    def to_author_block(self, author_id: str) -> dict[str, Any]:
        """Author fields embedded in post and comment payloads."""
        return {
            "authorId": author_id,
            "authorAlias": self.display_name,
            "authorRealName": self.real_name,
            "authorVisibilityLevel": self.visibility_level.value,
            "authorRole": self.role,
            "authorSchool": self.school,
            "authorGraduationYear": self.graduation_year,
            "isAnonymous": self.is_anonymous,
        }


class ConversationMessage(BaseModel):
    """One message in a conversation, user-written or system-generated."""

    id: str
    conversation_id: str
    sender_id: str
    kind: MessageKind = MessageKind.TEXT
    content: str
    created_at: datetime

    @field_validator("kind", mode="before")
    @classmethod
    def _normalize_kind(cls, value: Any) -> MessageKind:
        return MessageKind.parse(value)


class ConversationRecord(BaseModel):
    """
    Persisted shape of a two-party conversation.

    The reveal state machine reads and writes exactly
    `is_mutually_revealed`, `identity_reveal_requested_by` and
    `identity_reveal_requested_at`; `participant_anonymity` mirrors the
    per-participant anonymity flags cleared on mutual reveal.
    """

    id: str
    participant_ids: tuple[str, str]
    is_mutually_revealed: bool = False
    identity_reveal_requested_by: Optional[str] = None
    identity_reveal_requested_at: Optional[datetime] = None
    participant_anonymity: dict[str, bool] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participant_ids

    def counterpart_of(self, user_id: str) -> str:
        first, second = self.participant_ids
        return second if user_id == first else first

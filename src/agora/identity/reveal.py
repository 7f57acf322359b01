"""
Conversation identity-reveal state machine.

States: NO_REQUEST -> PENDING(requested_by, requested_at) -> MUTUALLY_REVEALED.
A decline returns PENDING to NO_REQUEST. MUTUALLY_REVEALED is terminal.

Everything here is pure: transitions take a state and return a new one plus
the system message to record, and never touch storage. The engine applies
them inside the store's per-conversation transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from agora.errors import InvalidState
from agora.identity.models import ConversationRecord, MessageKind

SYSTEM_MESSAGE_TEXT: dict[MessageKind, str] = {
    MessageKind.IDENTITY_REQUEST: "Identity reveal requested.",
    MessageKind.IDENTITY_ACCEPTED: "Identity reveal accepted.",
    MessageKind.IDENTITY_DECLINED: "Identity reveal request declined.",
}


class RevealPhase(str, Enum):
    """Phase of the reveal handshake."""

    NO_REQUEST = "no_request"
    PENDING = "pending"
    MUTUALLY_REVEALED = "mutually_revealed"


@dataclass(frozen=True)
class PendingRequest:
    requested_by: str
    requested_at: datetime


@dataclass(frozen=True)
class ConversationDisclosureState:
    """Reveal state of one conversation. Revealed and pending never coexist."""

    is_mutually_revealed: bool = False
    pending: PendingRequest | None = None

    def __post_init__(self) -> None:
        if self.is_mutually_revealed and self.pending is not None:
            raise ValueError("a mutually revealed conversation cannot have a pending request")

    @property
    def phase(self) -> RevealPhase:
        if self.is_mutually_revealed:
            return RevealPhase.MUTUALLY_REVEALED
        if self.pending is not None:
            return RevealPhase.PENDING
        return RevealPhase.NO_REQUEST

    @classmethod
    def from_record(cls, record: ConversationRecord) -> "ConversationDisclosureState":
        if record.is_mutually_revealed:
            return cls(is_mutually_revealed=True)
        if record.identity_reveal_requested_by and record.identity_reveal_requested_at:
            return cls(
                pending=PendingRequest(
                    requested_by=record.identity_reveal_requested_by,
                    requested_at=record.identity_reveal_requested_at,
                )
            )
        return cls()

    def record_fields(self) -> dict[str, Any]:
        """The three persisted reveal fields for this state."""
        return {
            "is_mutually_revealed": self.is_mutually_revealed,
            "identity_reveal_requested_by": self.pending.requested_by if self.pending else None,
            "identity_reveal_requested_at": self.pending.requested_at if self.pending else None,
        }


@dataclass(frozen=True)
class Transition:
    """Outcome of applying an operation to a state."""

    previous: ConversationDisclosureState
    state: ConversationDisclosureState
    message_kind: MessageKind | None = None

    @property
    def changed(self) -> bool:
        return self.message_kind is not None


def request_reveal(
    state: ConversationDisclosureState,
    requester_id: str,
    now: datetime,
) -> Transition:
    """
    Ask the other participant to reveal identities.

    No-op when already revealed, when the requester already has a pending
    request (the original timestamp is kept), and when the other participant
    has one pending (their request is never overwritten).
    """
    if state.phase is not RevealPhase.NO_REQUEST:
        return Transition(previous=state, state=state)

    return Transition(
        previous=state,
        state=ConversationDisclosureState(
            pending=PendingRequest(requested_by=requester_id, requested_at=now)
        ),
        message_kind=MessageKind.IDENTITY_REQUEST,
    )


def respond_reveal(
    state: ConversationDisclosureState,
    responder_id: str,
    accept: bool,
) -> Transition:
    """
    Accept or decline the pending request.

    Raises:
        InvalidState: no request is pending, or the responder made it
    """
    if state.pending is None:
        raise InvalidState("No pending identity reveal request", phase=state.phase.value)

    if state.pending.requested_by == responder_id:
        raise InvalidState("Cannot respond to your own identity request")

    if accept:
        return Transition(
            previous=state,
            state=ConversationDisclosureState(is_mutually_revealed=True),
            message_kind=MessageKind.IDENTITY_ACCEPTED,
        )

    return Transition(
        previous=state,
        state=ConversationDisclosureState(),
        message_kind=MessageKind.IDENTITY_DECLINED,
    )


@dataclass(frozen=True)
class PendingRequestView:
    from_user_id: str
    from_alias: str
    requested_at: datetime
    is_incoming: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "fromUserId": self.from_user_id,
            "fromAlias": self.from_alias,
            "requestedAt": self.requested_at.isoformat(),
            "isIncoming": self.is_incoming,
        }


@dataclass(frozen=True)
class ConversationDisclosureView:
    """Reveal state as one participant sees it."""

    is_revealed: bool
    pending_request: PendingRequestView | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"isRevealed": self.is_revealed}
        if self.pending_request is not None:
            data["pendingRequest"] = self.pending_request.to_dict()
        return data


def project(
    state: ConversationDisclosureState,
    viewer_id: str,
    requester_alias: str = "Anonymous",
) -> ConversationDisclosureView:
    """Render the shared state for one participant."""
    if state.is_mutually_revealed:
        return ConversationDisclosureView(is_revealed=True)
    if state.pending is None:
        return ConversationDisclosureView(is_revealed=False)
    return ConversationDisclosureView(
        is_revealed=False,
        pending_request=PendingRequestView(
            from_user_id=state.pending.requested_by,
            from_alias=requester_alias,
            requested_at=state.pending.requested_at,
            is_incoming=state.pending.requested_by != viewer_id,
        ),
    )

"""
IdentityDisclosureEngine: the disclosure side of the trust boundary.

Owns the identity-reveal handshake of two-party conversations and the
revealed-peer set that makes a private reveal visible on posts and comments.
Storage and user lookup are injected collaborators; every state transition
runs inside the store's per-conversation transaction so the state write and
its system message commit together.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from agora.errors import (
    ConversationNotFound,
    InvalidInput,
    NotParticipant,
    UserNotFound,
)
from agora.identity import reveal
from agora.identity.models import (
    ConversationMessage,
    ConversationRecord,
    DisclosurePresentation,
    MessageKind,
    UserIdentity,
)
from agora.identity.presentation import participant_block, present, sender_label
from agora.identity.rendering import ViewerContext
from agora.identity.reveal import (
    SYSTEM_MESSAGE_TEXT,
    ConversationDisclosureState,
    ConversationDisclosureView,
    Transition,
)
from agora.identity.store import (
    ConversationStore,
    ConversationTransaction,
    UserDirectory,
    utcnow,
)
from agora.logging import TraceContext, get_logger
from agora.safety.fields import MessageFields
from agora.safety.filter import ContentSafetyFilter, get_content_filter

logger = get_logger(__name__)


@dataclass(frozen=True)
class TranscriptEntry:
    """A message as rendered to a participant."""

    message: ConversationMessage
    sender_alias: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.message.id,
            "conversationId": self.message.conversation_id,
            "senderId": self.message.sender_id,
            "senderAlias": self.sender_alias,
            "content": self.message.content,
            "kind": self.message.kind.value,
            "createdAt": self.message.created_at.isoformat(),
        }


class IdentityDisclosureEngine:
    """
    Computes identity presentations and runs the reveal handshake.

    Participation is re-checked on every conversation operation even though
    the caller is expected to have authenticated the user already.
    """

    def __init__(
        self,
        conversations: ConversationStore,
        users: UserDirectory,
        content_filter: ContentSafetyFilter | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.conversations = conversations
        self.users = users
        self.content_filter = content_filter or get_content_filter()
        self._clock = clock

    # === Presentation ===

    def present(
        self,
        identity: UserIdentity,
        viewer_is_owner: bool = False,
        force_reveal: bool = False,
    ) -> DisclosurePresentation:
        return present(identity, viewer_is_owner=viewer_is_owner, force_reveal=force_reveal)

    async def revealed_peer_set(self, viewer_id: str) -> frozenset[str]:
        """Counterparts of every mutually revealed conversation of the viewer."""
        records = await self.conversations.list_for_user(viewer_id)
        return frozenset(
            record.counterpart_of(viewer_id)
            for record in records
            if record.is_mutually_revealed
        )

    async def viewer_context(self, viewer_id: str | None) -> ViewerContext:
        """Build the context threaded through one feed/thread/profile render."""
        if viewer_id is None:
            return ViewerContext.anonymous()
        return ViewerContext(
            viewer_id=viewer_id,
            revealed_peers=await self.revealed_peer_set(viewer_id),
        )

    async def present_user(self, user_id: str, viewer_id: str | None) -> DisclosurePresentation:
        """Profile view of `user_id` for `viewer_id`."""
        identity = await self.users.get(user_id)
        if identity is None:
            raise UserNotFound(user_id)
        context = await self.viewer_context(viewer_id)
        return context.present(identity)

    # === Conversations ===

    async def create_conversation(
        self, user_id: str, target_user_id: str
    ) -> tuple[ConversationRecord, bool]:
        """
        Open (or find) the direct conversation between two users.

        Returns:
            (record, existing) where `existing` is True if it already existed
        """
        if user_id == target_user_id:
            raise InvalidInput("Cannot create a conversation with yourself")
        if await self.users.get(target_user_id) is None:
            raise UserNotFound(target_user_id)

        existing = await self.conversations.find_direct(user_id, target_user_id)
        if existing is not None:
            return existing, True

        record = await self.conversations.create((user_id, target_user_id))
        logger.info("conversation_opened", conversation_id=record.id)
        return record, False

    async def _require_participant(self, conversation_id: str, user_id: str) -> ConversationRecord:
        record = await self.conversations.get(conversation_id)
        if record is None:
            raise ConversationNotFound(conversation_id)
        if not record.has_participant(user_id):
            raise NotParticipant(conversation_id, user_id)
        return record

    async def _project(
        self, state: ConversationDisclosureState, viewer_id: str
    ) -> ConversationDisclosureView:
        requester_alias = "Anonymous"
        if state.pending is not None:
            requester = await self.users.get(state.pending.requested_by)
            if requester is not None:
                requester_alias = present(requester).display_name
        return reveal.project(state, viewer_id, requester_alias)

    def _apply(
        self,
        tx: ConversationTransaction,
        transition: Transition,
        actor_id: str,
        now: datetime,
    ) -> None:
        if transition.message_kind is None:
            return
        fields = transition.state.record_fields()
        fields["updated_at"] = now
        if transition.state.is_mutually_revealed:
            fields["participant_anonymity"] = {
                user_id: False for user_id in tx.record.participant_ids
            }
        tx.update(**fields)
        tx.append_message(
            sender_id=actor_id,
            kind=transition.message_kind,
            content=SYSTEM_MESSAGE_TEXT[transition.message_kind],
            created_at=now,
        )

    async def get_disclosure_view(
        self, conversation_id: str, viewer_id: str
    ) -> ConversationDisclosureView:
        record = await self._require_participant(conversation_id, viewer_id)
        return await self._project(ConversationDisclosureState.from_record(record), viewer_id)

    async def request_reveal(
        self, conversation_id: str, requester_id: str
    ) -> ConversationDisclosureView:
        """
        Ask the counterpart to mutually reveal identities.

        Idempotent for a requester with a pending request; never overwrites
        the counterpart's pending request; no-op once revealed.
        """
        await self._require_participant(conversation_id, requester_id)

        with TraceContext(
            "identity_reveal_request",
            conversation_id=conversation_id,
            user_id=requester_id,
        ) as trace:
            async with self.conversations.transaction(conversation_id) as tx:
                now = self._clock()
                state = ConversationDisclosureState.from_record(tx.record)
                transition = reveal.request_reveal(state, requester_id, now)
                if transition.changed:
                    self._apply(tx, transition, requester_id, now)
                    trace.log_transition(state.phase.value, transition.state.phase.value)

        if transition.changed:
            logger.info("identity_reveal_requested", conversation_id=conversation_id)
        return await self._project(transition.state, requester_id)

    async def respond_reveal(
        self, conversation_id: str, responder_id: str, accept: bool
    ) -> ConversationDisclosureView:
        """
        Accept or decline the counterpart's pending request.

        Raises:
            InvalidState: nothing pending, or responding to your own request
        """
        await self._require_participant(conversation_id, responder_id)

        with TraceContext(
            "identity_reveal_respond",
            conversation_id=conversation_id,
            user_id=responder_id,
        ) as trace:
            async with self.conversations.transaction(conversation_id) as tx:
                now = self._clock()
                state = ConversationDisclosureState.from_record(tx.record)
                transition = reveal.respond_reveal(state, responder_id, accept)
                self._apply(tx, transition, responder_id, now)
                trace.log_transition(state.phase.value, transition.state.phase.value)

        logger.info(
            "identity_reveal_accepted" if accept else "identity_reveal_declined",
            conversation_id=conversation_id,
        )
        return await self._project(transition.state, responder_id)

    # === Messages ===

    async def _label_messages(
        self, record: ConversationRecord, messages: list[ConversationMessage]
    ) -> list[TranscriptEntry]:
        senders = await self.users.get_many({m.sender_id for m in messages})
        return [
            TranscriptEntry(
                message=message,
                sender_alias=sender_label(
                    senders.get(message.sender_id), record.is_mutually_revealed
                ),
            )
            for message in messages
        ]

    async def send_message(
        self, conversation_id: str, sender_id: str, content: str
    ) -> TranscriptEntry:
        """
        Append a user message after it passes the content filter.

        Raises:
            InvalidInput: blank content
            ValidationRejected: content blocked by the filter
        """
        fields = MessageFields(content=content or "")
        text = fields.content.strip()
        if not text:
            raise InvalidInput("Message content is required")
        self.content_filter.ensure_allowed(fields.labeled())

        await self._require_participant(conversation_id, sender_id)

        async with self.conversations.transaction(conversation_id) as tx:
            now = self._clock()
            message = tx.append_message(
                sender_id=sender_id,
                kind=MessageKind.TEXT,
                content=text,
                created_at=now,
            )
            record = tx.update(updated_at=now)

        entries = await self._label_messages(record, [message])
        return entries[0]

    async def transcript(self, conversation_id: str, viewer_id: str) -> list[TranscriptEntry]:
        """Messages oldest first; senders labeled by real name once revealed."""
        record = await self._require_participant(conversation_id, viewer_id)
        messages = sorted(
            await self.conversations.list_messages(conversation_id),
            key=lambda m: m.created_at,
        )
        return await self._label_messages(record, messages)

    async def participants(self, conversation_id: str, viewer_id: str) -> list[dict[str, Any]]:
        record = await self._require_participant(conversation_id, viewer_id)
        identities = await self.users.get_many(record.participant_ids)
        return [
            participant_block(user_id, identities.get(user_id), record.is_mutually_revealed)
            for user_id in record.participant_ids
        ]

    async def list_conversations(self, viewer_id: str) -> list[dict[str, Any]]:
        """Conversation summaries for the viewer, most recently updated first."""
        records = sorted(
            await self.conversations.list_for_user(viewer_id),
            key=lambda r: r.updated_at,
            reverse=True,
        )

        summaries = []
        for record in records:
            identities = await self.users.get_many(record.participant_ids)
            messages = await self.conversations.list_messages(record.id)
            last_message = None
            if messages:
                latest = max(messages, key=lambda m: m.created_at)
                last_message = (await self._label_messages(record, [latest]))[0].to_dict()

            view = await self._project(ConversationDisclosureState.from_record(record), viewer_id)
            summaries.append(
                {
                    "id": record.id,
                    "participants": [
                        participant_block(
                            user_id, identities.get(user_id), record.is_mutually_revealed
                        )
                        for user_id in record.participant_ids
                    ],
                    "lastMessage": last_message,
                    "identity": view.to_dict(),
                    "updatedAt": record.updated_at.isoformat(),
                }
            )
        return summaries

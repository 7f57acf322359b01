"""
Collaborator interfaces consumed by the disclosure engine, plus in-memory
implementations.

Persistence belongs to the surrounding application. The engine only needs
a per-conversation atomic read-modify-write (`transaction`) and a way to
resolve user identities. The in-memory versions back the HTTP app, the CLI
demo and the tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

from agora.errors import ConversationNotFound
from agora.identity.models import (
    ConversationMessage,
    ConversationRecord,
    MessageKind,
    UserIdentity,
)
from agora.logging import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationTransaction:
    """
    Staged changes to one conversation.

    The store commits the record and the staged messages together when the
    transaction body finishes without raising, and discards both otherwise.
    """

    def __init__(self, record: ConversationRecord):
        self.record = record
        self.staged_messages: list[ConversationMessage] = []

    def update(self, **fields: Any) -> ConversationRecord:
        self.record = self.record.model_copy(update=fields)
        return self.record

    def append_message(
        self,
        sender_id: str,
        kind: MessageKind,
        content: str,
        created_at: datetime,
    ) -> ConversationMessage:
        message = ConversationMessage(
            id=f"m-{uuid4()}",
            conversation_id=self.record.id,
            sender_id=sender_id,
            kind=kind,
            content=content,
            created_at=created_at,
        )
        self.staged_messages.append(message)
        return message


@runtime_checkable
class ConversationStore(Protocol):
    """Conversation persistence as seen by the disclosure engine."""

    async def create(self, participant_ids: tuple[str, str]) -> ConversationRecord:
        ...

    async def get(self, conversation_id: str) -> ConversationRecord | None:
        ...

    async def find_direct(self, user_a: str, user_b: str) -> ConversationRecord | None:
        ...

    async def list_for_user(self, user_id: str) -> list[ConversationRecord]:
        ...

    async def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        ...

    def transaction(
        self, conversation_id: str
    ) -> AbstractAsyncContextManager[ConversationTransaction]:
        """
        Per-conversation atomic read-modify-write.

        Raises:
            ConversationNotFound: if the conversation does not exist
        """
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Read-only access to user identities."""

    async def get(self, user_id: str) -> UserIdentity | None:
        ...

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, UserIdentity]:
        ...


class InMemoryConversationStore:
    """
    Process-local conversation store.

    Transactions on the same conversation are serialized with one
    asyncio.Lock per conversation id. A lock lives only while some
    transaction holds or waits on it, so the lock table stays bounded by
    the number of in-flight transactions.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._records: dict[str, ConversationRecord] = {}
        self._messages: dict[str, list[ConversationMessage]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    async def create(self, participant_ids: tuple[str, str]) -> ConversationRecord:
        now = self._clock()
        record = ConversationRecord(
            id=f"conv-{uuid4()}",
            participant_ids=participant_ids,
            participant_anonymity={user_id: True for user_id in participant_ids},
            created_at=now,
            updated_at=now,
        )
        self._records[record.id] = record
        self._messages[record.id] = []
        logger.debug("conversation_created", conversation_id=record.id)
        return record

    async def get(self, conversation_id: str) -> ConversationRecord | None:
        return self._records.get(conversation_id)

    async def find_direct(self, user_a: str, user_b: str) -> ConversationRecord | None:
        wanted = {user_a, user_b}
        for record in self._records.values():
            if set(record.participant_ids) == wanted:
                return record
        return None

    async def list_for_user(self, user_id: str) -> list[ConversationRecord]:
        return [r for r in self._records.values() if r.has_participant(user_id)]

    async def list_messages(self, conversation_id: str) -> list[ConversationMessage]:
        return list(self._messages.get(conversation_id, []))

    @asynccontextmanager
    async def transaction(self, conversation_id: str) -> AsyncIterator[ConversationTransaction]:
        lock = self._locks.setdefault(conversation_id, asyncio.Lock())
        self._lock_users[conversation_id] = self._lock_users.get(conversation_id, 0) + 1
        try:
            async with lock:
                record = self._records.get(conversation_id)
                if record is None:
                    raise ConversationNotFound(conversation_id)
                tx = ConversationTransaction(record)
                yield tx
                self._commit(tx)
        finally:
            self._lock_users[conversation_id] -= 1
            if not self._lock_users[conversation_id]:
                del self._lock_users[conversation_id]
                del self._locks[conversation_id]

    def _commit(self, tx: ConversationTransaction) -> None:
        self._records[tx.record.id] = tx.record
        self._messages.setdefault(tx.record.id, []).extend(tx.staged_messages)


class InMemoryUserDirectory:
    """Process-local user directory."""

    def __init__(self, identities: Iterable[UserIdentity] = ()):
        self._identities: dict[str, UserIdentity] = {}
        for identity in identities:
            self.add(identity)

    def add(self, identity: UserIdentity) -> UserIdentity:
        self._identities[identity.user_id] = identity
        return identity

    async def get(self, user_id: str) -> UserIdentity | None:
        return self._identities.get(user_id)

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, UserIdentity]:
        return {
            user_id: self._identities[user_id]
            for user_id in user_ids
            if user_id in self._identities
        }

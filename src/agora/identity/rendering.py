"""
Per-request viewer context for rendering authored content.

A mutual reveal in a private conversation elevates disclosure between that
pair everywhere on the platform (posts, comments, profiles). The revealed
peer set is computed once per render request and carried here so every
author block in a feed or thread goes through the same rule.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from agora.identity.models import DisclosurePresentation, UserIdentity
from agora.identity.presentation import present


@dataclass(frozen=True)
class ViewerContext:
    """Who is looking, and whom they have mutually revealed with."""

    viewer_id: str | None = None
    revealed_peers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def anonymous(cls) -> "ViewerContext":
        return cls()

    def is_owner(self, author_id: str) -> bool:
        return self.viewer_id is not None and author_id == self.viewer_id

    def force_reveal_for(self, author_id: str) -> bool:
        return self.viewer_id is not None and author_id in self.revealed_peers

    def present(self, identity: UserIdentity) -> DisclosurePresentation:
        return present(
            identity,
            viewer_is_owner=self.is_owner(identity.user_id),
            force_reveal=self.force_reveal_for(identity.user_id),
        )

    def author_block(self, identity: UserIdentity) -> dict[str, Any]:
        return self.present(identity).to_author_block(identity.user_id)

    def author_blocks(self, identities: Iterable[UserIdentity]) -> list[dict[str, Any]]:
        return [self.author_block(identity) for identity in identities]

"""
Identity disclosure for rendered authors and conversation participants.

- Visibility-level presentation rules (pure)
- Per-conversation mutual identity-reveal handshake
- Revealed-peer set applied to every authored-content render
"""

from agora.identity.engine import IdentityDisclosureEngine, TranscriptEntry
from agora.identity.models import (
    ConversationMessage,
    ConversationRecord,
    DisclosurePresentation,
    MessageKind,
    UserIdentity,
    VisibilityLevel,
)
from agora.identity.presentation import present
from agora.identity.rendering import ViewerContext
from agora.identity.reveal import (
    ConversationDisclosureState,
    ConversationDisclosureView,
    PendingRequest,
    PendingRequestView,
    RevealPhase,
)
from agora.identity.store import (
    ConversationStore,
    InMemoryConversationStore,
    InMemoryUserDirectory,
    UserDirectory,
)

__all__ = [
    # Models
    "ConversationMessage",
    "ConversationRecord",
    "DisclosurePresentation",
    "MessageKind",
    "UserIdentity",
    "VisibilityLevel",
    # Presentation
    "present",
    "ViewerContext",
    # Reveal handshake
    "ConversationDisclosureState",
    "ConversationDisclosureView",
    "PendingRequest",
    "PendingRequestView",
    "RevealPhase",
    # Engine and collaborators
    "IdentityDisclosureEngine",
    "TranscriptEntry",
    "ConversationStore",
    "UserDirectory",
    "InMemoryConversationStore",
    "InMemoryUserDirectory",
]

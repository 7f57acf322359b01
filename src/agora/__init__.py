"""
Agora: trust and disclosure core of a career-networking community.

This package decides what user-authored text may be published and how much
of a real person each rendered identity exposes.

Architecture:
- Content safety filter (layered blocklist passes, linear time, no I/O)
- Visibility-level identity presentation
- Per-conversation mutual identity reveal, applied platform-wide to the pair
- Thin FastAPI surface over both
"""

__version__ = "0.1.0"

from agora.config import Settings, get_settings
from agora.identity import (
    IdentityDisclosureEngine,
    UserIdentity,
    ViewerContext,
    VisibilityLevel,
    present,
)
from agora.safety import ContentSafetyFilter, ModerationMatch, Violation

__all__ = [
    "ContentSafetyFilter",
    "IdentityDisclosureEngine",
    "ModerationMatch",
    "Settings",
    "UserIdentity",
    "ViewerContext",
    "Violation",
    "VisibilityLevel",
    "get_settings",
    "present",
    "__version__",
]

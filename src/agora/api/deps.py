"""
FastAPI dependencies: service auth, caller identity, engine and filter.

Without `set_engine`, the app runs on an in-memory engine whose user
directory starts empty, so every conversation and profile route answers
404 until identities are added. Seed it with
`provide_engine().users.add(UserIdentity(...))`, or install an engine
backed by real storage with `set_engine(...)` at startup.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from agora.config import get_settings
from agora.identity.engine import IdentityDisclosureEngine
from agora.identity.store import InMemoryConversationStore, InMemoryUserDirectory
from agora.safety.filter import ContentSafetyFilter, get_content_filter

# Process-wide engine; replaced by tests and by deployments with real storage
_engine: IdentityDisclosureEngine | None = None


def require_service_auth(authorization: str | None = Header(None)) -> str:
    """Require Authorization: Bearer <token> if configured.

    If `AGORA_API_TOKEN` (settings.api_token) is set, enforce matching token.
    If not set, allow access (development convenience).
    Returns the token used (may be empty string if not configured).
    """
    settings = get_settings()
    configured = settings.api_token
    if not configured:
        return ""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token"
        )
    token = authorization.split(" ", 1)[1].strip()
    if token != configured:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token"
        )
    return token


def optional_user_id(
    request: Request, token: str = Depends(require_service_auth)
) -> str | None:
    """User id asserted by the upstream authentication layer, if any."""
    settings = get_settings()
    user_id = (request.headers.get(settings.user_id_header) or "").strip()
    return user_id or None


def require_user_id(user_id: str | None = Depends(optional_user_id)) -> str:
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    return user_id


def set_engine(engine: IdentityDisclosureEngine | None) -> None:
    global _engine
    _engine = engine


def provide_engine() -> IdentityDisclosureEngine:
    """Provide the disclosure engine, building an empty in-memory one on first use."""
    global _engine
    if _engine is None:
        _engine = IdentityDisclosureEngine(
            conversations=InMemoryConversationStore(),
            users=InMemoryUserDirectory(),
        )
    return _engine


def provide_content_filter() -> ContentSafetyFilter:
    return get_content_filter()

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from agora.api.deps import (
    optional_user_id,
    provide_content_filter,
    provide_engine,
    require_service_auth,
    require_user_id,
)
from agora.api.schemas import (
    DirectConversationRequest,
    ModerationCheckRequest,
    RevealResponseRequest,
    SendMessageRequest,
)
from agora.errors import moderation_message
from agora.identity.engine import IdentityDisclosureEngine
from agora.safety.filter import ContentSafetyFilter

router = APIRouter(
    prefix="/api",
    tags=["trust"],
    dependencies=[Depends(require_service_auth)],
)


@router.post("/moderation/check")
async def check_content(
    payload: ModerationCheckRequest,
    content_filter: ContentSafetyFilter = Depends(provide_content_filter),
) -> dict[str, Any]:
    violation = content_filter.check(payload.fields)
    if violation is None:
        return {"blocked": False, "field": None, "matches": [], "message": None}
    return {
        "blocked": True,
        "field": violation.field,
        "matches": violation.sorted_matches(),
        "message": moderation_message(violation.field),
    }


@router.post("/conversations/direct")
async def open_direct_conversation(
    payload: DirectConversationRequest,
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> dict[str, Any]:
    record, existing = await engine.create_conversation(
        user_id, payload.target_user_id.strip()
    )
    return {"conversationId": record.id, "existing": existing}


@router.get("/conversations")
async def list_conversations(
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> list[dict[str, Any]]:
    return await engine.list_conversations(user_id)


@router.get("/conversations/{conversation_id}/identity")
async def get_identity(
    conversation_id: str,
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> dict[str, Any]:
    view = await engine.get_disclosure_view(conversation_id, user_id)
    return view.to_dict()


@router.post("/conversations/{conversation_id}/identity/request")
async def request_identity_reveal(
    conversation_id: str,
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> dict[str, Any]:
    view = await engine.request_reveal(conversation_id, user_id)
    return {"ok": True, "identity": view.to_dict()}


@router.post("/conversations/{conversation_id}/identity/respond")
async def respond_identity_reveal(
    conversation_id: str,
    payload: RevealResponseRequest,
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> dict[str, Any]:
    view = await engine.respond_reveal(conversation_id, user_id, payload.accept)
    return {"ok": True, "identity": view.to_dict()}


@router.get("/conversations/{conversation_id}/messages")
async def get_messages(
    conversation_id: str,
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> list[dict[str, Any]]:
    entries = await engine.transcript(conversation_id, user_id)
    return [entry.to_dict() for entry in entries]


@router.post("/conversations/{conversation_id}/messages")
async def send_message(
    conversation_id: str,
    payload: SendMessageRequest,
    user_id: str = Depends(require_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> dict[str, Any]:
    entry = await engine.send_message(conversation_id, user_id, payload.content)
    return entry.to_dict()


@router.get("/users/{target_user_id}/presentation")
async def get_user_presentation(
    target_user_id: str,
    viewer_id: str | None = Depends(optional_user_id),
    engine: IdentityDisclosureEngine = Depends(provide_engine),
) -> dict[str, Any]:
    presentation = await engine.present_user(target_user_id, viewer_id)
    return presentation.to_dict()

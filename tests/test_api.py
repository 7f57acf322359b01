import pytest
from fastapi.testclient import TestClient

from agora.api.deps import provide_engine, set_engine
from agora.app import app
from agora.config import get_settings
from agora.identity import (
    IdentityDisclosureEngine,
    InMemoryConversationStore,
    InMemoryUserDirectory,
    UserIdentity,
    VisibilityLevel,
)
from agora.safety import ContentSafetyFilter

A = {"X-User-Id": "user-a"}
B = {"X-User-Id": "user-b"}
C = {"X-User-Id": "user-c"}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("AGORA_API_TOKEN", raising=False)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    users = InMemoryUserDirectory(
        [
            UserIdentity(
                user_id="user-a",
                alias="QuietOtter",
                real_name="Ada Byron",
                visibility_level=VisibilityLevel.ANONYMOUS,
            ),
            UserIdentity(user_id="user-b", alias="BrightFalcon", real_name="Sam Rivera"),
            UserIdentity(user_id="user-c", alias="CalmHeron"),
        ]
    )
    set_engine(
        IdentityDisclosureEngine(
            InMemoryConversationStore(),
            users,
            content_filter=ContentSafetyFilter(enforce=True),
        )
    )
    yield TestClient(app)
    set_engine(None)
    get_settings.cache_clear()  # type: ignore[attr-defined]


def open_conversation(client):
    res = client.post("/api/conversations/direct", json={"targetUserId": "user-b"}, headers=A)
    assert res.status_code == 200
    return res.json()["conversationId"]


def test_moderation_check(client):
    res = client.post(
        "/api/moderation/check",
        json={
            "fields": [
                {"label": "title", "value": "Hello"},
                {"label": "content", "value": "s.h.i.t"},
            ]
        },
    )
    assert res.status_code == 200
    data = res.json()
    assert data["blocked"] is True
    assert data["field"] == "content"
    assert "shit" in data["matches"]
    assert data["message"] == (
        "Content contains inappropriate language. Please revise and try again."
    )

    res = client.post("/api/moderation/check", json={"fields": [{"label": "title", "value": "Hello"}]})
    assert res.json() == {"blocked": False, "field": None, "matches": [], "message": None}


def test_user_header_required(client):
    res = client.get("/api/conversations")
    assert res.status_code == 401


def test_open_conversation_twice(client):
    conversation_id = open_conversation(client)
    res = client.post("/api/conversations/direct", json={"targetUserId": "user-a"}, headers=B)
    assert res.json() == {"conversationId": conversation_id, "existing": True}


def test_open_conversation_errors(client):
    res = client.post("/api/conversations/direct", json={"targetUserId": "user-a"}, headers=A)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_INPUT"

    res = client.post("/api/conversations/direct", json={"targetUserId": "ghost"}, headers=A)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.integration
def test_reveal_flow(client):
    conversation_id = open_conversation(client)

    res = client.post(f"/api/conversations/{conversation_id}/identity/request", headers=A)
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["identity"]["pendingRequest"]["isIncoming"] is False

    res = client.get(f"/api/conversations/{conversation_id}/identity", headers=B)
    pending = res.json()["pendingRequest"]
    assert pending["fromUserId"] == "user-a"
    assert pending["fromAlias"] == "QuietOtter"
    assert pending["isIncoming"] is True

    res = client.post(
        f"/api/conversations/{conversation_id}/identity/respond",
        json={"accept": True},
        headers=B,
    )
    assert res.json() == {"ok": True, "identity": {"isRevealed": True}}

    res = client.get("/api/users/user-a/presentation", headers=B)
    assert res.json()["realName"] == "Ada Byron"
    assert res.json()["displayName"] == "QuietOtter"

    res = client.get("/api/users/user-a/presentation", headers=C)
    assert res.json()["realName"] is None
    assert res.json()["isAnonymous"] is True

    res = client.get("/api/users/user-a/presentation")
    assert res.json()["realName"] is None

    res = client.get(f"/api/conversations/{conversation_id}/messages", headers=A)
    assert [m["kind"] for m in res.json()] == ["identity-request", "identity-accepted"]


def test_respond_without_pending_request(client):
    conversation_id = open_conversation(client)
    res = client.post(
        f"/api/conversations/{conversation_id}/identity/respond",
        json={"accept": True},
        headers=B,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_STATE"


def test_non_participant_and_missing_conversation(client):
    conversation_id = open_conversation(client)

    res = client.get(f"/api/conversations/{conversation_id}/identity", headers=C)
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "NOT_PARTICIPANT"

    res = client.get("/api/conversations/conv-missing/identity", headers=A)
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "CONVERSATION_NOT_FOUND"


def test_messages(client):
    conversation_id = open_conversation(client)

    res = client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"content": "Hello there"},
        headers=A,
    )
    assert res.status_code == 200
    assert res.json()["senderAlias"] == "QuietOtter"

    res = client.post(
        f"/api/conversations/{conversation_id}/messages",
        json={"content": "sh1t"},
        headers=A,
    )
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Message contains inappropriate language. Please revise and try again."
    assert body["error"]["code"] == "VALIDATION_REJECTED"
    assert body["error"]["details"] == {"field": "message"}

    res = client.get("/api/conversations", headers=B)
    summaries = res.json()
    assert len(summaries) == 1
    assert summaries[0]["lastMessage"]["content"] == "Hello there"


def test_service_token(client, monkeypatch):
    monkeypatch.setenv("AGORA_API_TOKEN", "test-service-token")
    get_settings.cache_clear()  # type: ignore[attr-defined]

    assert client.get("/api/conversations", headers=A).status_code == 401
    assert (
        client.get(
            "/api/conversations",
            headers={**A, "Authorization": "Bearer wrong"},
        ).status_code
        == 403
    )
    res = client.get(
        "/api/conversations",
        headers={**A, "Authorization": "Bearer test-service-token"},
    )
    assert res.status_code == 200
    assert res.json() == []


@pytest.mark.parametrize("accept", ["yes", "true", "on", 1])
def test_respond_requires_json_true(client, accept):
    conversation_id = open_conversation(client)
    client.post(f"/api/conversations/{conversation_id}/identity/request", headers=A)

    res = client.post(
        f"/api/conversations/{conversation_id}/identity/respond",
        json={"accept": accept},
        headers=B,
    )
    assert res.status_code == 422

    res = client.get(f"/api/conversations/{conversation_id}/identity", headers=B)
    assert res.json()["isRevealed"] is False
    assert res.json()["pendingRequest"]["fromUserId"] == "user-a"


def test_default_engine_can_be_seeded(client):
    set_engine(None)
    res = client.post("/api/conversations/direct", json={"targetUserId": "user-b"}, headers=A)
    assert res.status_code == 404

    engine = provide_engine()
    engine.users.add(UserIdentity(user_id="user-a", alias="QuietOtter"))
    engine.users.add(UserIdentity(user_id="user-b", alias="BrightFalcon"))

    res = client.post("/api/conversations/direct", json={"targetUserId": "user-b"}, headers=A)
    assert res.status_code == 200
    assert res.json()["existing"] is False

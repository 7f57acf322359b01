from agora.config import Environment, Settings, get_settings
from agora.safety import ContentSafetyFilter


def test_defaults(monkeypatch):
    for name in ["ENVIRONMENT", "MODERATION_ENABLED", "AGORA_API_TOKEN", "AGORA_USER_ID_HEADER"]:
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.environment == Environment.DEVELOPMENT
    assert settings.is_development
    assert settings.moderation_enabled is True
    assert settings.api_token is None
    assert settings.user_id_header == "X-User-Id"


def test_moderation_flag(monkeypatch):
    monkeypatch.setenv("MODERATION_ENABLED", "off")
    assert Settings().moderation_enabled is False
    monkeypatch.setenv("MODERATION_ENABLED", "1")
    assert Settings().moderation_enabled is True


def test_blank_token_means_no_auth(monkeypatch):
    monkeypatch.setenv("AGORA_API_TOKEN", "")
    assert Settings().api_token is None


def test_filter_enforcement_follows_settings(monkeypatch):
    monkeypatch.setenv("MODERATION_ENABLED", "false")
    get_settings.cache_clear()  # type: ignore[attr-defined]
    try:
        assert ContentSafetyFilter().enforce is False
    finally:
        get_settings.cache_clear()  # type: ignore[attr-defined]

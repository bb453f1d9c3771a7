from replica_chat.config import DEFAULT_API_URL, get_settings
from replica_chat.constants import API_VERSION


def test_defaults():
    s = get_settings()
    assert s.api_key is None
    assert s.api_url == DEFAULT_API_URL
    assert s.api_version == API_VERSION
    assert s.request_timeout is None
    assert s.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SENSAY_API_KEY_SECRET", "  secret  ")
    monkeypatch.setenv("SENSAY_API_URL", "http://localhost:8080/")
    monkeypatch.setenv("SENSAY_API_VERSION", "2024-01-01")
    monkeypatch.setenv("SENSAY_REQUEST_TIMEOUT", "30")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()
    s = get_settings()
    assert s.api_key == "secret"
    assert s.api_url == "http://localhost:8080"
    assert s.api_version == "2024-01-01"
    assert s.request_timeout == 30.0
    assert s.log_level == "DEBUG"


def test_invalid_timeout_is_ignored(monkeypatch):
    for raw in ("soon", "0", "-3"):
        monkeypatch.setenv("SENSAY_REQUEST_TIMEOUT", raw)
        get_settings.cache_clear()
        assert get_settings().request_timeout is None

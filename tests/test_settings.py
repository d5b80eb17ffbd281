from etf_portfolio_server.config import settings as settings_module
from etf_portfolio_server.config.settings import get_settings
from etf_portfolio_server.tools.registry import build_gemini_client

ENV_KEYS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "API_KEY",
    "GEMINI_MODEL",
    "GEMINI_TEMPERATURE",
    "REQUEST_TIMEOUT_SECONDS",
    "REQUEST_MAX_RETRIES",
    "LOG_LEVEL",
)


def _clean_env(monkeypatch) -> None:
    monkeypatch.setattr(settings_module, "load_dotenv", lambda: False)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_api_key(monkeypatch) -> None:
    _clean_env(monkeypatch)
    settings = get_settings()
    assert settings.gemini_api_key is None
    assert settings.gemini_model == "gemini-2.5-flash"
    assert settings.gemini_temperature == 0.7
    assert build_gemini_client(settings) is None


def test_environment_overrides(monkeypatch) -> None:
    _clean_env(monkeypatch)
    monkeypatch.setenv("API_KEY", "legacy-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("GEMINI_TEMPERATURE", "0.2")
    monkeypatch.setenv("REQUEST_MAX_RETRIES", "4")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    client = build_gemini_client(settings)

    assert settings.gemini_api_key == "legacy-key"
    assert settings.log_level == "DEBUG"
    assert client is not None
    assert client.model == "gemini-2.5-pro"
    assert client.temperature == 0.2
    assert client.max_retries == 4


def test_invalid_numbers_fall_back(monkeypatch) -> None:
    _clean_env(monkeypatch)
    monkeypatch.setenv("GEMINI_TEMPERATURE", "warm")
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "")
    settings = get_settings()
    assert settings.gemini_temperature == 0.7
    assert settings.request_timeout_seconds == 30.0

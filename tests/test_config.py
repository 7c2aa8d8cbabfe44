from tripledger.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("LEDGER_BASE_CURRENCY", raising=False)
    monkeypatch.delenv("LEDGER_STRICT_SHARES", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    settings = Settings()  # type: ignore[call-arg]
    assert settings.base_currency == "EUR"
    assert settings.strict_shares is False
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LEDGER_BASE_CURRENCY", "usd")
    monkeypatch.setenv("LEDGER_STRICT_SHARES", "1")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.base_currency == "USD"
        assert settings.strict_shares is True
        assert settings.log_level == "DEBUG"
    finally:
        get_settings.cache_clear()

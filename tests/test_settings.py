from todo_api.settings import get_settings


def test_defaults(monkeypatch):
    for name in ("CORS_ALLOW_ORIGINS", "LOG_LEVEL", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)
    settings = get_settings()
    assert settings.cors_allow_origins == ["*"]
    assert settings.log_level == "INFO"
    assert settings.default_page_size == 10
    assert settings.max_page_size == 1000


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "25")
    monkeypatch.setenv("MAX_PAGE_SIZE", "50")
    settings = get_settings()
    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.log_level == "DEBUG"
    assert settings.default_page_size == 25
    assert settings.max_page_size == 50


def test_malformed_sizes_fall_back(monkeypatch):
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "lots")
    monkeypatch.setenv("MAX_PAGE_SIZE", "-1")
    settings = get_settings()
    assert settings.default_page_size == 10
    assert settings.max_page_size == 1000


def test_default_page_size_capped_by_max(monkeypatch):
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "500")
    monkeypatch.setenv("MAX_PAGE_SIZE", "100")
    assert get_settings().default_page_size == 100

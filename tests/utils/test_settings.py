import os

from dependency_injector import providers

from blog_portal.config.settings import DEFAULT_CONFIG, apply_config, build_config, load_dotenv_file


def test_defaults_without_environment():
    config = build_config(environ={})
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG
    assert config["ui"]["public_page_size"] == 9
    assert config["ui"]["search_debounce_ms"] == 400


def test_environment_overrides():
    config = build_config(environ={
        "BLOG_PORTAL_API_URL": "http://localhost:3000/api",
        "BLOG_PORTAL_TIMEOUT": "12",
        "BLOG_PORTAL_LOG_LEVEL": "WARNING",
    })
    assert config["api"]["base_url"] == "http://localhost:3000/api"
    assert config["api"]["timeout"] == 12
    assert config["logging"]["level"] == "WARNING"
    assert DEFAULT_CONFIG["api"]["timeout"] == 30


def test_invalid_timeout_is_ignored():
    assert build_config(environ={"BLOG_PORTAL_TIMEOUT": "soon"})["api"]["timeout"] == 30


def test_development_env_enables_debug_logging():
    assert build_config(environ={"BLOG_PORTAL_ENV": "development"})["logging"]["level"] == "DEBUG"


def test_apply_config_fills_provider():
    config = providers.Configuration()
    apply_config(config, environ={"BLOG_PORTAL_UPLOAD_URL": "http://up.test/upload"})
    assert config.api.upload_url() == "http://up.test/upload"
    assert config.ui.admin_page_size() == 10


def test_load_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.delenv("BLOG_PORTAL_ENV", raising=False)
    assert load_dotenv_file(str(tmp_path)) is False
    (tmp_path / ".env").write_text("BLOG_PORTAL_ENV=staging\n")
    assert load_dotenv_file(str(tmp_path)) is True
    assert build_config()["env"] == "staging"
    os.environ.pop("BLOG_PORTAL_ENV", None)

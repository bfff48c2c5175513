"""Tests for environment-driven settings and .env loading."""

from dotenv import load_dotenv

from chatrelay.config import Settings


def test_defaults():
    s = Settings()

    assert s.server_host == "localhost"
    assert s.server_port == 8080
    assert s.cors_origin == "http://localhost:5173"
    assert s.ollama_url == "http://localhost:11434"
    assert s.ollama_model == "llama3.2:3b"
    assert s.relay_url == "http://localhost:8080"


def test_environment_overrides_with_type_conversion(monkeypatch):
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("OLLAMA_MODEL", "mistral")
    monkeypatch.setenv("OLLAMA_CONNECT_TIMEOUT", "2.5")
    monkeypatch.setenv("LOG_COLORS", "no")

    s = Settings()

    assert s.server_port == 9090
    assert s.ollama_model == "mistral"
    assert s.upstream_connect_timeout == 2.5
    assert s.log_colors is False


def test_explicit_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("PORT", "9090")
    s = Settings()

    s.override(server_port=7000, server_host=None)

    assert s.server_port == 7000
    assert s.server_host == "localhost"


def test_dotenv_file_populates_settings_without_overriding_env(
    tmp_path, monkeypatch
):
    env_file = tmp_path / ".env"
    env_file.write_text("OLLAMA_MODEL=phi3\nCORS_ORIGIN=http://from-file\n")
    monkeypatch.setenv("CORS_ORIGIN", "http://from-env")
    # Registered so monkeypatch removes it again after load_dotenv sets it
    monkeypatch.setenv("OLLAMA_MODEL", "placeholder")
    monkeypatch.delenv("OLLAMA_MODEL")

    load_dotenv(dotenv_path=env_file, override=False)
    s = Settings()

    assert s.cors_origin == "http://from-env"
    assert s.ollama_model == "phi3"


def test_logging_settings_are_normalised(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("UVICORN_LOG_LEVEL", "warning")

    s = Settings()

    assert s.log_format == "json"
    assert s.log_level == "DEBUG"
    assert s.uvicorn_log_level == "WARNING"

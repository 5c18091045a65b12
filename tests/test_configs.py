import logging

from taskboard.configs import Settings, get_settings, get_secrets_from_env, load_secrets
from taskboard.logging_setup import setup_logging


def test_defaults_without_file_or_env(tmp_path, monkeypatch):
    for name in ("SECRET_KEY", "DATABASE_PATH", "TOKEN_TTL_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(f"TASKBOARD_{name}", raising=False)
    assert get_settings(tmp_path / "missing.toml") == Settings()


def test_env_values_are_coerced(monkeypatch):
    monkeypatch.setenv("TASKBOARD_SECRET_KEY", "from-env")
    monkeypatch.setenv("TASKBOARD_TOKEN_TTL_SECONDS", "120")
    settings = get_secrets_from_env("taskboard", Settings)
    assert settings.secret_key == "from-env"
    assert settings.token_ttl_seconds == 120
    assert settings.database_path == Settings.database_path


def test_secrets_file_takes_precedence(tmp_path, monkeypatch):
    monkeypatch.setenv("TASKBOARD_SECRET_KEY", "from-env")
    secrets_file = tmp_path / "secrets.toml"
    secrets_file.write_text(
        '[taskboard]\nsecret_key = "from-file"\ndatabase_path = "tasks.db"\ntoken_ttl_seconds = 60\n'
    )
    settings = get_settings(secrets_file)
    assert settings == Settings(secret_key="from-file", database_path="tasks.db", token_ttl_seconds=60)


def test_load_secrets_missing_file(tmp_path):
    assert load_secrets(tmp_path / "nope.toml") == {}


def test_setup_logging_replaces_handler():
    setup_logging("debug")
    setup_logging("DEBUG")
    logger = logging.getLogger("taskboard")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

    setup_logging("not-a-level")
    assert logger.level == logging.INFO

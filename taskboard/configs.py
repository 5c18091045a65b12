"""
Configuration utilities for the Taskboard application.

This module loads the application settings from a TOML secrets file or from
environment variables, using a dataclass as the configuration model.
"""

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Type
import tomllib


TASKBOARD_DIR = Path(".taskboard")
if Path().resolve().name == "tests":
    TASKBOARD_DIR = Path("..") / ".taskboard"

SECRETS_FILE = (TASKBOARD_DIR / "secrets.toml").resolve()


@dataclass(frozen=True)
class Settings:
    """
    Read-only settings shared by every request.

    Attributes:
        secret_key: Key used to sign and verify access tokens
        database_path: Path of the SQLite database file
        token_ttl_seconds: How long an access token stays valid after issue
        log_level: Name of the logging level for the application loggers
    """
    secret_key: str = "default-secret-please-configure"
    database_path: str = "taskboard.db"
    token_ttl_seconds: int = 3600
    log_level: str = "INFO"


def get_settings(secrets_file: Path = SECRETS_FILE) -> Settings:
    """Load the application settings from the `[taskboard]` section or `TASKBOARD_*` env vars."""
    return get_secrets("taskboard", Settings, secrets_file)


def get_secrets[T](key: str, model: Type[T], secrets_file: Path = SECRETS_FILE) -> T:
    """
    Get secrets for a specific key and convert them to a dataclass instance.

    This function first tries to load secrets from the secrets.toml file.
    If the key is not found, it falls back to environment variables.

    Args:
        key: The section key in the secrets file
        model: The dataclass type to instantiate with the secrets
        secrets_file: The TOML file to read

    Returns:
        An instance of the specified dataclass populated with the secrets
    """
    secrets = load_secrets(secrets_file)
    if key not in secrets:
        return get_secrets_from_env(key, model)

    return model(**_coerce_fields(model, secrets[key]))


def get_secrets_from_env[T](key: str, model: Type[T]) -> T:
    """
    Get secrets from environment variables and convert them to a dataclass instance.

    Environment variables are named KEY_FIELD, where KEY is the uppercase
    version of the key parameter and FIELD is the uppercase field name.
    Fields without a variable keep their dataclass default.
    """
    values = {
        field.name: os.environ[f"{key.upper()}_{field.name.upper()}"]
        for field in dataclasses.fields(model)
        if f"{key.upper()}_{field.name.upper()}" in os.environ
    }
    return model(**_coerce_fields(model, values))


def _coerce_fields(model: type, values: dict[str, Any]) -> dict[str, Any]:
    # Environment values are always strings; convert them to the declared field types.
    types = {field.name: field.type for field in dataclasses.fields(model)}
    coerced = {}
    for name, value in values.items():
        if name not in types:
            raise ValueError(f"Unknown setting: {name}")
        field_type = types[name]
        if field_type is int and not isinstance(value, int):
            value = int(value)
        elif field_type is str and not isinstance(value, str):
            value = str(value)
        coerced[name] = value
    return coerced


def load_secrets(path: Path) -> dict[str, Any]:
    """
    Load secrets from a TOML file.

    Args:
        path: The path to the secrets TOML file

    Returns:
        A dictionary containing the secrets, or an empty dictionary if the file does not exist
    """
    path = path.resolve()
    if not path.exists():
        return {}

    with path.open("rb") as f:
        return tomllib.load(f)

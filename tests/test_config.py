"""Tests for settings validation and database URL handling."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from src.config import Settings
from src.infrastructure.database import Database, normalize_database_url


def test_defaults(monkeypatch):
    for name in ("PORT", "API_PREFIX", "ENFORCE_ENUMERATIONS", "DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.api_prefix == "/api"
    assert settings.enforce_enumerations is True
    assert settings.database_url.startswith("sqlite+aiosqlite://")


@pytest.mark.parametrize(
    "raw, expected",
    [("/api", "/api"), ("api/", "/api"), ("/v1/", "/v1"), ("", ""), ("/", "")],
)
def test_api_prefix_is_normalised(raw, expected):
    assert Settings(_env_file=None, api_prefix=raw).api_prefix == expected


def test_log_level_is_uppercased():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


@pytest.mark.parametrize("field, value", [("environment", "qa"), ("log_level", "LOUD")])
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ENFORCE_ENUMERATIONS", "false")
    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.enforce_enumerations is False


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgres://u:p@db/helpdesk", "postgresql+asyncpg://u:p@db/helpdesk"),
        ("postgresql://u:p@db/helpdesk", "postgresql+asyncpg://u:p@db/helpdesk"),
        (
            "postgresql://u:p@db/helpdesk?sslmode=require",
            "postgresql+asyncpg://u:p@db/helpdesk?ssl=require",
        ),
        ("sqlite:///./helpdesk.db", "sqlite+aiosqlite:///./helpdesk.db"),
        ("sqlite+aiosqlite:///:memory:", "sqlite+aiosqlite:///:memory:"),
    ],
)
def test_normalize_database_url(url, expected):
    assert normalize_database_url(url) == expected


def test_database_backend_name():
    sqlite = Database(Settings(_env_file=None, database_url="sqlite:///x.db"))
    postgres = Database(Settings(_env_file=None, database_url="postgres://u:p@db/h"))
    assert sqlite.backend == "sqlite"
    assert postgres.backend == "postgresql"


def test_engine_requires_connect():
    database = Database(Settings(_env_file=None))
    assert not database.is_connected
    with pytest.raises(RuntimeError):
        database.engine

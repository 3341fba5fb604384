"""
Tests for settings and database helpers.
"""

import sqlite3
from pathlib import Path
from types import SimpleNamespace

import pytest
from alembic import command
from alembic.config import Config

import parlor.db
from parlor.config import Settings
from parlor.db import Base, TemplateVariable, upsert

ALEMBIC_DIR = Path(parlor.db.__file__).parent / "alembic"


def test_settings_defaults(monkeypatch):
    for name in ("SESSION_TIMEOUT_SECS", "SESSION_SWEEP_PERIOD_SECS", "SESSION_COOKIE_SECURE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.session_timeout_secs == 1200
    assert settings.session_sweep_period_secs == 300
    assert settings.session_cookie_secure is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SESSION_TIMEOUT_SECS", "60")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.example, http://b.example,")

    settings = Settings(_env_file=None)

    assert settings.session_timeout_secs == 60
    assert settings.session_cookie_secure is True
    assert settings.log_level == "DEBUG"
    assert settings.cors_origin_list == ["http://a.example", "http://b.example"]


@pytest.mark.asyncio
async def test_upsert_rejects_unknown_dialect(db_session, monkeypatch):
    mysql = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    monkeypatch.setattr(db_session, "get_bind", lambda *args, **kwargs: mysql)

    with pytest.raises(ValueError, match="mysql"):
        upsert(db_session, TemplateVariable)


def test_migrations_create_stamped_schema(tmp_path):
    """alembic builds the whole schema on a fresh file and records its revision."""
    db_file = tmp_path / "data" / "parlor.db"
    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    cfg.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_file}")

    command.upgrade(cfg, "head")
    # Nothing left to apply on a second run
    command.upgrade(cfg, "head")

    conn = sqlite3.connect(db_file)
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        version = conn.execute("SELECT version_num FROM alembic_version").fetchone()[0]
    finally:
        conn.close()

    assert set(Base.metadata.tables) <= tables
    assert version == "0001"

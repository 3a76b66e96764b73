"""Tests for settings"""

from hypeshelf.config import Settings


def test_database_url_from_parts(monkeypatch):
    monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)

    settings = Settings(
        POSTGRES_USER="u",
        POSTGRES_PASSWORD="p",
        POSTGRES_HOST="db",
        POSTGRES_PORT=5433,
        POSTGRES_DB="shelf",
        _env_file=None,
    )

    assert settings.DATABASE_URL == "postgresql://u:p@db:5433/shelf"


def test_database_url_override():
    settings = Settings(SQLALCHEMY_DATABASE_URI="sqlite:///./shelf.db", _env_file=None)

    assert settings.DATABASE_URL == "sqlite:///./shelf.db"


def test_defaults(monkeypatch):
    for name in ("FEED_PAGE_SIZE", "AUTH_JWT_ALGORITHMS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.FEED_PAGE_SIZE == 50
    assert settings.AUTH_JWT_ALGORITHMS == ["HS256"]

"""Database helper configuration tests (no live database)."""

import pytest

from core import db


class TestDatabaseUrl:
    def test_missing_url_raises(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError, match="DATABASE_URL is not set"):
            db.database_url()

    def test_sslmode_is_stripped(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/app?sslmode=disable&application_name=api")
        assert db.database_url() == "postgresql://u:p@db:5432/app?application_name=api"

    def test_url_without_query_is_unchanged(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "  postgresql://u:p@db:5432/app  ")
        assert db.database_url() == "postgresql://u:p@db:5432/app"


class TestPoolSettings:
    def test_defaults(self, monkeypatch):
        for name in ("DB_POOL_MIN_SIZE", "DB_POOL_MAX_SIZE", "DB_COMMAND_TIMEOUT_S"):
            monkeypatch.delenv(name, raising=False)
        assert (db.pool_min_size(), db.pool_max_size(), db.command_timeout_s()) == (1, 5, 30)

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "lots")
        assert db.pool_max_size() == 5

    def test_max_never_below_min(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MIN_SIZE", "4")
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")
        assert db.pool_max_size() == 4


def test_pool_must_be_initialized():
    with pytest.raises(RuntimeError, match="not initialized"):
        db.pool()

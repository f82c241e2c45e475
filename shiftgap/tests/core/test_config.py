import pytest
from pydantic import ValidationError

from shiftgap.core.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FALLBACK_NET_SHIFT_HOURS", raising=False)
        monkeypatch.delenv("STRICT_ORG_SCOPE", raising=False)
        s = Settings(_env_file=None)
        assert s.FALLBACK_NET_SHIFT_HOURS == 8.0
        assert s.STRICT_ORG_SCOPE is True

    def test_postgres_url_uses_async_driver(self):
        s = Settings(_env_file=None, DATABASE_URL="postgres://u:p@db:5432/app")
        assert s.SQLALCHEMY_DATABASE_URI == "postgresql+asyncpg://u:p@db:5432/app"

    def test_async_url_is_kept(self):
        s = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///./x.db")
        assert s.SQLALCHEMY_DATABASE_URI == "sqlite+aiosqlite:///./x.db"

    @pytest.mark.parametrize(
        "field,value",
        [("FALLBACK_NET_SHIFT_HOURS", 0), ("COMPETENCE_FETCH_CONCURRENCY", -1)],
    )
    def test_rejects_invalid_gap_settings(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STRICT_ORG_SCOPE", "false")
        monkeypatch.setenv("COMPETENCE_FETCH_CONCURRENCY", "4")
        s = Settings(_env_file=None)
        assert s.STRICT_ORG_SCOPE is False
        assert s.COMPETENCE_FETCH_CONCURRENCY == 4

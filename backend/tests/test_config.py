import pytest

from student_records.config import Settings


def test_defaults(monkeypatch):
    for name in ("ENV", "LOG_LEVEL", "ALLOWED_ORIGINS", "SQL_ECHO"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    s = Settings()
    assert s.ENV == "dev"
    assert s.LOG_LEVEL == "INFO"
    assert s.ALLOWED_ORIGINS == ["*"]
    assert s.SQL_ECHO is False
    assert s.is_sqlite


def test_origins_are_split(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
    assert Settings().ALLOWED_ORIGINS == ["http://a.test", "http://b.test"]


def test_unknown_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError):
        Settings()


def test_empty_database_url_rejected(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "  ")
    with pytest.raises(RuntimeError):
        Settings()

import pytest

from markwiki.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.HTTP_SERVER_PORT == 8080
    assert settings.WIKIDB_QUEUE == "wikidb.queue"
    assert settings.MESSAGE_BUS_BACKEND == "local"
    assert settings.PAGE_STORE_BACKEND == "sql"
    assert settings.DATABASE_POOL_SIZE == 30
    assert settings.EMPTY_PAGE_MARKDOWN.startswith("# A new page")


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("MARKDOWN_EXTENSIONS", "tables, toc")
    monkeypatch.setenv("HTTP_SERVER_PORT", "9090")

    settings = Settings(_env_file=None)

    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.MARKDOWN_EXTENSIONS == ["tables", "toc"]
    assert settings.HTTP_SERVER_PORT == 9090

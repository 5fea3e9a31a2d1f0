from pathlib import Path
from typing import Generator
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from markwiki.config import Settings, get_settings
from markwiki.main import app as main_app


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'wiki.db'}",
        DATABASE_POOL_SIZE=5,
        MESSAGE_BUS_BACKEND="local",
        PAGE_STORE_BACKEND="sql",
        BUS_REPLY_TIMEOUT=5.0,
    )


@pytest.fixture(autouse=True)
def patch_settings(test_settings: Settings, mocker: MockerFixture) -> None:
    mocker.patch("markwiki.main.settings", test_settings)


@pytest.fixture
def test_app(test_settings: Settings) -> Generator[FastAPI, None, None]:
    def get_test_settings() -> Settings:
        return test_settings

    main_app.dependency_overrides[get_settings] = get_test_settings
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(test_app, follow_redirects=False) as client:
        yield client

from pathlib import Path
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jinja2 import TemplateError
from pytest_mock import MockerFixture

from markwiki.common.exceptions import BusTimeoutException, DatabaseStartupException
from markwiki.config import Settings
from markwiki.database.client import DatabaseClient
from markwiki.web.rendering import templates


def test_app_refuses_to_start_when_schema_fails(
    test_app: FastAPI,
    test_settings: Settings,
    tmp_path: Path,
    mocker: MockerFixture,
) -> None:
    broken_settings = test_settings.model_copy(
        update={"DATABASE_URL": f"sqlite:///{tmp_path / 'missing' / 'wiki.db'}"}
    )
    mocker.patch("markwiki.main.settings", broken_settings)

    with pytest.raises(DatabaseStartupException):
        with TestClient(test_app):
            pass


def test_bus_timeout_returns_504(
    test_client: TestClient, mocker: MockerFixture
) -> None:
    mocker.patch.object(
        DatabaseClient,
        "all_pages",
        side_effect=BusTimeoutException("wikidb.queue", "all-pages", 5.0),
    )

    response = test_client.get("/")

    assert response.status_code == 504
    assert response.json() == {
        "detail": "The database service did not reply in time"
    }


def test_template_error_returns_500(
    test_app: FastAPI, mocker: MockerFixture
) -> None:
    mocker.patch.object(
        templates, "TemplateResponse", side_effect=TemplateError("broken template")
    )

    with TestClient(test_app, raise_server_exceptions=False) as client:
        response = client.get("/wiki/Home")
        assert response.status_code == 500
        assert response.json() == {"detail": "An unexpected error occurred"}

        # The failure is limited to that request
        assert client.get("/healthcheck").status_code == 200

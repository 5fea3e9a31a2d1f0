from unittest.mock import Mock
import pytest
from celery import signals
from celery.exceptions import WorkerShutdown
from pytest_mock import MockerFixture

from markwiki.common.exceptions import (
    ResourceAlreadyExistsException,
    ResourceType,
    UnknownActionException,
)
from markwiki.database.service import DatabaseService
from markwiki.database.tasks import handle_database_request, prepare_database
from markwiki.pages.store.base import PageStore


@pytest.fixture
def failing_page_store(mocker: MockerFixture) -> Mock:
    page_store = mocker.Mock(spec=PageStore)
    page_store.create_schema.side_effect = RuntimeError("unable to open database")
    mocker.patch(
        "markwiki.database.tasks.get_page_store_backend", return_value=page_store
    )
    mocker.patch("markwiki.database.tasks.database_service", None)
    return page_store


@pytest.fixture
def mock_database_service(mocker: MockerFixture) -> Mock:
    service = mocker.Mock(spec=DatabaseService)
    mocker.patch(
        "markwiki.database.tasks.get_database_service", return_value=service
    )
    return service


def test_handle_request_success(mock_database_service: Mock) -> None:
    mock_database_service.handle_message.return_value = {"pages": ["Home"]}

    result = handle_database_request({"action": "all-pages"})

    assert result == {
        "succeeded": True,
        "body": {"pages": ["Home"]},
        "failure_code": None,
        "message": None,
    }
    mock_database_service.handle_message.assert_called_once_with(
        {"action": "all-pages"}
    )


def test_handle_request_already_exists(mock_database_service: Mock) -> None:
    mock_database_service.handle_message.side_effect = ResourceAlreadyExistsException(
        ResourceType.PAGE, "Home"
    )

    result = handle_database_request(
        {"action": "create-page", "title": "Home", "markdown": ""}
    )

    assert result["succeeded"] is False
    assert result["failure_code"] == "already-exists"
    assert result["message"] == "Page 'Home' already exists"


def test_handle_request_unknown_action(mock_database_service: Mock) -> None:
    mock_database_service.handle_message.side_effect = UnknownActionException(
        "drop-table"
    )

    result = handle_database_request({"action": "drop-table"})

    assert result["succeeded"] is False
    assert result["failure_code"] == "unknown-action"


def test_handle_request_store_error(mock_database_service: Mock) -> None:
    mock_database_service.handle_message.side_effect = RuntimeError("disk I/O error")

    result = handle_database_request({"action": "all-pages"})

    assert result["succeeded"] is False
    assert result["failure_code"] == "store-error"
    assert result["message"] == "disk I/O error"


def test_prepare_database_builds_service_once(mocker: MockerFixture) -> None:
    page_store = mocker.Mock(spec=PageStore)
    mocker.patch(
        "markwiki.database.tasks.get_page_store_backend", return_value=page_store
    )
    mocker.patch("markwiki.database.tasks.database_service", None)
    page_store.list_names.return_value = ["Home"]

    prepare_database()
    result = handle_database_request({"action": "all-pages"})

    assert result["succeeded"] is True
    assert result["body"] == {"pages": ["Home"]}
    page_store.create_schema.assert_called_once()
    page_store.close.assert_called_once()


def test_schema_failure_shuts_worker_down(failing_page_store: Mock) -> None:
    with pytest.raises(WorkerShutdown):
        signals.worker_init.send(sender=None)

    failing_page_store.create_schema.assert_called_once()


def test_task_does_not_retry_schema_after_failure(failing_page_store: Mock) -> None:
    with pytest.raises(WorkerShutdown):
        prepare_database()

    result = handle_database_request({"action": "all-pages"})

    assert result["succeeded"] is False
    assert result["failure_code"] == "store-error"
    failing_page_store.create_schema.assert_called_once()

import logging
from typing import Any
from celery import signals
from celery.exceptions import WorkerShutdown

from markwiki.bus.schemas import ReplyEnvelope
from markwiki.celery import DATABASE_TASK_NAME, celery_app
from markwiki.common.exceptions import DatabaseStartupException, failure_code_for
from markwiki.config import get_settings
from markwiki.database.service import DatabaseService
from markwiki.pages.store.backend import get_page_store_backend

logger = logging.getLogger(__name__)

database_service: DatabaseService | None = None


def build_database_service() -> DatabaseService:
    settings = get_settings()
    service = DatabaseService(
        page_store=get_page_store_backend(settings),
        empty_page_markdown=settings.EMPTY_PAGE_MARKDOWN,
    )
    service.ensure_schema()
    return service


@signals.worker_init.connect
def prepare_database(**kwargs: Any) -> None:
    """Prepare the page store once, before the worker consumes any task."""
    global database_service
    try:
        service = build_database_service()
    except DatabaseStartupException as e:
        raise WorkerShutdown(str(e)) from e

    # Pool processes are forked after this point and open their own connections
    service.page_store.close()
    database_service = service


def get_database_service() -> DatabaseService:
    if database_service is None:
        raise DatabaseStartupException("Database service is not prepared")
    return database_service


@celery_app.task(name=DATABASE_TASK_NAME)
def handle_database_request(message: dict[str, Any]) -> dict[str, Any]:
    """Celery task answering one wiki database request."""
    try:
        body = get_database_service().handle_message(message)
    except Exception as e:
        logger.error(f"Action '{message.get('action')}' failed: {e}")
        return ReplyEnvelope.failure(failure_code_for(e), str(e)).model_dump(
            mode="json"
        )
    return ReplyEnvelope.success(body).model_dump(mode="json")

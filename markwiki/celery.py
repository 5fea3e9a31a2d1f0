from datetime import timedelta
import logging
from typing import Any
from celery import Celery, signals

from markwiki.config import get_settings

settings = get_settings()

redis_url = settings.REDIS_URL

DATABASE_TASK_NAME = "Handle Wiki Database Request"

celery_app = Celery(
    __name__,
    broker=redis_url,
    backend=redis_url,
    broker_connection_retry_on_startup=True,
    include=["markwiki.database.tasks"],
    result_expires=timedelta(hours=1),
    task_default_queue=settings.WIKIDB_QUEUE,
)


@signals.setup_logging.connect
def setup_celery_logging(**kwargs: Any) -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)

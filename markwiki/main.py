import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError

from markwiki.bus.backend import get_message_bus_backend
from markwiki.common.exceptions import (
    BusTimeoutException,
    ReplyFailedException,
    bus_timeout_handler,
    reply_failed_handler,
    unexpected_exception_handler,
    validation_exception_handler,
)
from markwiki.config import get_settings
from markwiki.database.client import DatabaseClient
from markwiki.database.service import DatabaseService
from markwiki.healthcheck.router import router as health_router
from markwiki.pages.store.backend import get_page_store_backend
from markwiki.web.router import router as wiki_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    message_bus = get_message_bus_backend(settings)
    page_store = None
    try:
        # With the local bus this process hosts the database service itself
        if settings.MESSAGE_BUS_BACKEND == "local":
            page_store = get_page_store_backend(settings)
            database_service = DatabaseService(
                page_store=page_store,
                empty_page_markdown=settings.EMPTY_PAGE_MARKDOWN,
            )
            await run_in_threadpool(database_service.ensure_schema)
            message_bus.register(
                settings.WIKIDB_QUEUE, database_service.handle_message
            )

        await message_bus.start()

        app.state.message_bus = message_bus
        app.state.page_store = page_store
        app.state.database_client = DatabaseClient(
            bus=message_bus, address=settings.WIKIDB_QUEUE
        )
        logger.info(
            f"Wiki is ready (bus: {settings.MESSAGE_BUS_BACKEND}, address: {settings.WIKIDB_QUEUE})"
        )
        yield
    finally:
        await message_bus.stop()
        if page_store:
            page_store.close()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    lifespan=lifespan,
    version=settings.MARKWIKI_VERSION,
)

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ReplyFailedException)(reply_failed_handler)
app.exception_handler(BusTimeoutException)(bus_timeout_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(wiki_router)

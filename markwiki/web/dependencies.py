from fastapi import Request

from markwiki.bus.base import MessageBus
from markwiki.database.client import DatabaseClient
from markwiki.pages.store.base import PageStore


def get_database_client(request: Request) -> DatabaseClient:
    return request.app.state.database_client


def get_message_bus(request: Request) -> MessageBus:
    return request.app.state.message_bus


def get_page_store(request: Request) -> PageStore | None:
    return request.app.state.page_store

import logging
from typing import Any
from pydantic import TypeAdapter, ValidationError

from markwiki.common.exceptions import (
    DatabaseStartupException,
    InvalidMessageException,
    UnknownActionException,
)
from markwiki.pages.schemas import (
    ACTIONS,
    Ack,
    AllPagesReply,
    AllPagesRequest,
    CreatePageRequest,
    DatabaseReply,
    DatabaseRequest,
    DeletePageRequest,
    GetPageReply,
    GetPageRequest,
    SavePageRequest,
)
from markwiki.pages.store.base import PageStore

logger = logging.getLogger(__name__)

request_adapter: TypeAdapter[DatabaseRequest] = TypeAdapter(DatabaseRequest)


class DatabaseService:
    """Sole owner of the page store; answers the five wiki database actions."""

    def __init__(self, *, page_store: PageStore, empty_page_markdown: str) -> None:
        self.page_store = page_store
        self.empty_page_markdown = empty_page_markdown

    def ensure_schema(self) -> None:
        try:
            self.page_store.create_schema()
        except Exception as e:
            logger.error(f"Database preparation error: {e}")
            raise DatabaseStartupException("Database preparation error") from e
        logger.info("Page store is ready")

    def parse_message(self, message: dict[str, Any]) -> DatabaseRequest:
        action = message.get("action")
        if action not in ACTIONS:
            logger.warning(f"Received message with unknown action '{action}'")
            raise UnknownActionException(action)

        try:
            return request_adapter.validate_python(message)
        except ValidationError as e:
            raise InvalidMessageException(
                f"Invalid payload for action '{action}': {e}"
            ) from e

    def handle_message(self, message: dict[str, Any]) -> dict[str, Any]:
        """Handle an untyped bus message and return the reply body."""
        request = self.parse_message(message)
        return self.handle(request).model_dump(by_alias=True)

    def handle(self, request: DatabaseRequest) -> DatabaseReply:
        if isinstance(request, AllPagesRequest):
            return self.all_pages()
        if isinstance(request, GetPageRequest):
            return self.get_page(request.page)
        if isinstance(request, CreatePageRequest):
            return self.create_page(request.title, request.markdown)
        if isinstance(request, SavePageRequest):
            return self.save_page(request.id, request.markdown)
        if isinstance(request, DeletePageRequest):
            return self.delete_page(request.id)
        raise UnknownActionException(getattr(request, "action", None))

    def all_pages(self) -> AllPagesReply:
        return AllPagesReply(pages=self.page_store.list_names())

    def get_page(self, name: str) -> GetPageReply:
        page = self.page_store.get_by_name(name)
        if page is None:
            return GetPageReply(
                found=False, id=-1, raw_content=self.empty_page_markdown
            )
        return GetPageReply(found=True, id=page.id, raw_content=page.content)

    def create_page(self, title: str, markdown: str) -> Ack:
        self.page_store.create(title, markdown)
        return Ack()

    def save_page(self, id: int, markdown: str) -> Ack:
        # Last writer wins; there is no version check on the page.
        self.page_store.update_content(id, markdown)
        return Ack()

    def delete_page(self, id: int) -> Ack:
        self.page_store.delete(id)
        return Ack()

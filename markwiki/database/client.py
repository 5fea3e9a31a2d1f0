from typing import TypeVar
from pydantic import BaseModel

from markwiki.bus.base import MessageBus
from markwiki.pages.schemas import (
    Ack,
    AllPagesReply,
    AllPagesRequest,
    CreatePageRequest,
    DeletePageRequest,
    GetPageReply,
    GetPageRequest,
    SavePageRequest,
)

ReplyT = TypeVar("ReplyT", bound=BaseModel)


class DatabaseClient:
    """Typed facade over the bus for talking to the database service."""

    def __init__(self, *, bus: MessageBus, address: str) -> None:
        self.bus = bus
        self.address = address

    async def _send(self, request: BaseModel, reply_type: type[ReplyT]) -> ReplyT:
        body = await self.bus.request(self.address, request.model_dump(by_alias=True))
        return reply_type.model_validate(body)

    async def all_pages(self) -> AllPagesReply:
        return await self._send(AllPagesRequest(), AllPagesReply)

    async def get_page(self, name: str) -> GetPageReply:
        return await self._send(GetPageRequest(page=name), GetPageReply)

    async def create_page(self, title: str, markdown: str) -> Ack:
        return await self._send(CreatePageRequest(title=title, markdown=markdown), Ack)

    async def save_page(self, id: int, markdown: str) -> Ack:
        return await self._send(SavePageRequest(id=id, markdown=markdown), Ack)

    async def delete_page(self, id: int) -> Ack:
        return await self._send(DeletePageRequest(id=id), Ack)

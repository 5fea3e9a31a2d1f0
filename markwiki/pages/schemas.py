from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    id: int
    name: str
    content: str


# Requests sent to the database service, one model per action.
class AllPagesRequest(BaseModel):
    action: Literal["all-pages"] = "all-pages"


class GetPageRequest(BaseModel):
    action: Literal["get-page"] = "get-page"
    page: str


class CreatePageRequest(BaseModel):
    action: Literal["create-page"] = "create-page"
    title: str
    markdown: str


class SavePageRequest(BaseModel):
    action: Literal["save-page"] = "save-page"
    id: int
    markdown: str


class DeletePageRequest(BaseModel):
    action: Literal["delete-page"] = "delete-page"
    id: int


DatabaseRequest = Annotated[
    Union[
        AllPagesRequest,
        GetPageRequest,
        CreatePageRequest,
        SavePageRequest,
        DeletePageRequest,
    ],
    Field(discriminator="action"),
]

ACTIONS: tuple[str, ...] = (
    "all-pages",
    "get-page",
    "create-page",
    "save-page",
    "delete-page",
)


# Replies
class AllPagesReply(BaseModel):
    pages: list[str]


class GetPageReply(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    found: bool
    id: int
    raw_content: str = Field(alias="rawContent")


class Ack(BaseModel):
    ok: bool = True


DatabaseReply = Union[AllPagesReply, GetPageReply, Ack]

from markwiki.common.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from markwiki.common.redis import RedisClient
from markwiki.pages.schemas import Page
from markwiki.pages.store.base import PageStore


class RedisPageStore(PageStore):
    """Pages kept as one hash per page plus a name -> id index hash.

    Keys (under ``key_prefix``):
      ``next_id``    counter used to allocate page ids
      ``names``      hash of page name -> page id
      ``page:<id>``  hash with ``name`` and ``content``
    """

    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    @property
    def _names_key(self) -> str:
        return f"{self.key_prefix}:names"

    @property
    def _counter_key(self) -> str:
        return f"{self.key_prefix}:next_id"

    def _page_key(self, id: int | str) -> str:
        return f"{self.key_prefix}:page:{id}"

    def create_schema(self) -> None:
        self.client.ping()

    def list_names(self) -> list[str]:
        return sorted(self.client.hkeys(self._names_key))

    def get_by_name(self, name: str) -> Page | None:
        page_id = self.client.hget(self._names_key, name)
        if page_id is None:
            return None

        page = self.client.hgetall(self._page_key(page_id))
        if not page:
            return None

        return Page(id=int(page_id), name=page["name"], content=page["content"])

    def create(self, name: str, content: str) -> None:
        page_id = self.client.incr(self._counter_key)
        page_key = self._page_key(page_id)
        self.client.hset(page_key, mapping={"name": name, "content": content})

        if not self.client.hsetnx(self._names_key, name, page_id):
            self.client.delete(page_key)
            raise ResourceAlreadyExistsException(ResourceType.PAGE, name)

    def update_content(self, id: int, content: str) -> None:
        page_key = self._page_key(id)
        if not self.client.exists(page_key):
            raise ResourceNotFoundException(ResourceType.PAGE, str(id))

        self.client.hset(page_key, "content", content)

    def delete(self, id: int) -> None:
        page_key = self._page_key(id)
        name = self.client.hget(page_key, "name")
        if name is None:
            return

        pipeline = self.client.pipeline()
        pipeline.delete(page_key)
        pipeline.hdel(self._names_key, name)
        pipeline.execute()

    def ping(self) -> None:
        self.client.ping()

    def close(self) -> None:
        self.client.close()

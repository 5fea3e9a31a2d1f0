from markwiki.config import Settings
from markwiki.common.redis import create_redis_client
from markwiki.pages.store.base import PageStore
from markwiki.pages.store.redis.store import RedisPageStore
from markwiki.pages.store.sql.store import SqlPageStore


def get_page_store_backend(settings: Settings) -> PageStore:
    if settings.PAGE_STORE_BACKEND == "sql":
        return SqlPageStore(
            database_url=settings.DATABASE_URL,
            pool_size=settings.DATABASE_POOL_SIZE,
        )
    elif settings.PAGE_STORE_BACKEND == "redis":
        return RedisPageStore(
            redis_client=create_redis_client(settings.REDIS_URL),
            key_prefix=settings.PAGE_STORE_NAMESPACE,
        )
    else:
        raise ValueError(
            f"Unsupported page store backend: {settings.PAGE_STORE_BACKEND}"
        )

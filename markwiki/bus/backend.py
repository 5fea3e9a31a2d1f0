from markwiki.config import Settings
from markwiki.bus.base import MessageBus
from markwiki.bus.celery import CeleryMessageBus
from markwiki.bus.local import LocalMessageBus
from markwiki.celery import celery_app
from markwiki.common.redis import create_redis_client


def get_message_bus_backend(settings: Settings) -> MessageBus:
    if settings.MESSAGE_BUS_BACKEND == "local":
        return LocalMessageBus(reply_timeout=settings.BUS_REPLY_TIMEOUT)
    elif settings.MESSAGE_BUS_BACKEND == "celery":
        return CeleryMessageBus(
            celery_app=celery_app,
            redis_client=create_redis_client(settings.REDIS_URL),
            reply_timeout=settings.BUS_REPLY_TIMEOUT,
        )
    else:
        raise ValueError(
            f"Unsupported message bus backend: {settings.MESSAGE_BUS_BACKEND}"
        )

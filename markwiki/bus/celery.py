import logging
from typing import Any
from celery import Celery
from celery.exceptions import TimeoutError as CeleryTimeoutError
from fastapi.concurrency import run_in_threadpool

from markwiki.bus.base import Message, MessageBus, MessageHandler
from markwiki.bus.schemas import ReplyEnvelope
from markwiki.celery import DATABASE_TASK_NAME
from markwiki.common.exceptions import (
    BusTimeoutException,
    FailureCode,
    ReplyFailedException,
)
from markwiki.common.redis import RedisClient

logger = logging.getLogger(__name__)


class CeleryMessageBus(MessageBus):
    """Bus whose handlers run in Celery workers consuming the address queue."""

    def __init__(
        self,
        *,
        celery_app: Celery,
        redis_client: RedisClient,
        reply_timeout: float,
        task_name: str = DATABASE_TASK_NAME,
    ) -> None:
        self.celery_app = celery_app
        self.redis_client = redis_client
        self.reply_timeout = reply_timeout
        self.task_name = task_name

    def register(self, address: str, handler: MessageHandler) -> None:
        raise ValueError(
            f"Cannot register a handler on '{address}': "
            "handlers for the Celery bus are hosted by Celery workers"
        )

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        self.redis_client.close()

    async def request(self, address: str, message: Message) -> Message:
        action = str(message.get("action"))
        try:
            reply = await run_in_threadpool(self._send_and_wait, address, message)
        except CeleryTimeoutError as e:
            raise BusTimeoutException(address, action, self.reply_timeout) from e
        except ReplyFailedException:
            raise
        except Exception as e:
            logger.error(f"Action '{action}' on '{address}' failed in worker: {e}")
            raise ReplyFailedException(FailureCode.STORE_ERROR, str(e)) from e

        return ReplyEnvelope.model_validate(reply).unwrap()

    def _send_and_wait(self, address: str, message: Message) -> dict[str, Any]:
        result = self.celery_app.send_task(self.task_name, args=[message], queue=address)
        try:
            return result.get(timeout=self.reply_timeout)
        except CeleryTimeoutError:
            result.revoke()
            raise

    def health(self) -> dict[str, Any]:
        try:
            self.redis_client.ping()
            inspect = self.celery_app.control.inspect()
            active_workers = inspect.active()
            if not active_workers:
                raise Exception("No active workers found")
        except Exception as e:
            return {"status": "error", "message": str(e)}
        return {"status": "ok", "active_workers": len(active_workers.keys())}

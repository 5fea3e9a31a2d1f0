import asyncio
import logging
from dataclasses import dataclass
from typing import Any
from fastapi.concurrency import run_in_threadpool

from markwiki.bus.base import Message, MessageBus, MessageHandler
from markwiki.common.exceptions import (
    BusTimeoutException,
    FailureCode,
    ReplyFailedException,
    failure_code_for,
)

logger = logging.getLogger(__name__)


@dataclass
class Delivery:
    message: Message
    reply: "asyncio.Future[Message]"


class LocalMessageBus(MessageBus):
    """In-process bus: one queue and one consumer task per address.

    Each consumer handles its messages one at a time, so the handler behind an
    address is the single writer for whatever it owns. Handlers are blocking
    callables and run in the threadpool.
    """

    def __init__(self, *, reply_timeout: float) -> None:
        self.reply_timeout = reply_timeout
        self._handlers: dict[str, MessageHandler] = {}
        self._queues: dict[str, asyncio.Queue[Delivery]] = {}
        self._consumers: dict[str, asyncio.Task[None]] = {}

    def register(self, address: str, handler: MessageHandler) -> None:
        if address in self._handlers:
            raise ValueError(f"A handler is already registered on '{address}'")
        self._handlers[address] = handler

    async def start(self) -> None:
        for address, handler in self._handlers.items():
            if address in self._consumers:
                continue
            queue: asyncio.Queue[Delivery] = asyncio.Queue()
            self._queues[address] = queue
            self._consumers[address] = asyncio.create_task(
                self._consume(address, queue, handler),
                name=f"bus-consumer:{address}",
            )
            logger.info(f"Consumer started on '{address}'")

    async def stop(self) -> None:
        consumers = list(self._consumers.values())
        for consumer in consumers:
            consumer.cancel()
        await asyncio.gather(*consumers, return_exceptions=True)

        for address, queue in self._queues.items():
            while not queue.empty():
                delivery = queue.get_nowait()
                self._fail(
                    delivery,
                    ReplyFailedException(
                        FailureCode.NO_HANDLERS, f"Bus stopped before '{address}' replied"
                    ),
                )

        self._consumers.clear()
        self._queues.clear()

    async def request(self, address: str, message: Message) -> Message:
        queue = self._queues.get(address)
        if queue is None:
            raise ReplyFailedException(
                FailureCode.NO_HANDLERS, f"No handlers for address '{address}'"
            )

        delivery = Delivery(
            message=message, reply=asyncio.get_running_loop().create_future()
        )
        await queue.put(delivery)

        try:
            return await asyncio.wait_for(delivery.reply, timeout=self.reply_timeout)
        except asyncio.TimeoutError as e:
            raise BusTimeoutException(
                address, str(message.get("action")), self.reply_timeout
            ) from e

    def health(self) -> dict[str, Any]:
        stopped = [
            address for address, task in self._consumers.items() if task.done()
        ]
        if stopped:
            return {
                "status": "error",
                "message": f"Consumers stopped: {', '.join(stopped)}",
            }
        return {"status": "ok", "consumers": len(self._consumers)}

    async def _consume(
        self, address: str, queue: asyncio.Queue[Delivery], handler: MessageHandler
    ) -> None:
        while True:
            delivery = await queue.get()
            try:
                # The requester gave up (timeout or cancellation).
                if delivery.reply.done():
                    continue

                action = delivery.message.get("action")
                try:
                    reply = await run_in_threadpool(handler, delivery.message)
                except asyncio.CancelledError:
                    self._fail(
                        delivery,
                        ReplyFailedException(
                            FailureCode.NO_HANDLERS,
                            f"Bus stopped before '{address}' replied",
                        ),
                    )
                    raise
                except Exception as e:
                    logger.error(f"Action '{action}' on '{address}' failed: {e}")
                    self._fail(delivery, ReplyFailedException(failure_code_for(e), str(e)))
                else:
                    if not delivery.reply.done():
                        delivery.reply.set_result(reply)
            finally:
                queue.task_done()

    @staticmethod
    def _fail(delivery: Delivery, exc: ReplyFailedException) -> None:
        if not delivery.reply.done():
            delivery.reply.set_exception(exc)

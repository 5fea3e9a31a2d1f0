from abc import ABC, abstractmethod
from typing import Any, Callable

Message = dict[str, Any]
MessageHandler = Callable[[Message], Message]


class MessageBus(ABC):
    @abstractmethod
    def register(self, address: str, handler: MessageHandler) -> None:
        pass

    @abstractmethod
    async def start(self) -> None:
        pass

    @abstractmethod
    async def stop(self) -> None:
        pass

    @abstractmethod
    async def request(self, address: str, message: Message) -> Message:
        """Send ``message`` to ``address`` and wait for its single reply.

        Raises ``ReplyFailedException`` when the handler fails and
        ``BusTimeoutException`` when no reply arrives in time.
        """
        pass

    @abstractmethod
    def health(self) -> dict[str, Any]:
        pass

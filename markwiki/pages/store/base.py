from abc import ABC, abstractmethod

from markwiki.pages.schemas import Page


class PageStore(ABC):
    @abstractmethod
    def create_schema(self) -> None:
        pass

    @abstractmethod
    def list_names(self) -> list[str]:
        pass

    @abstractmethod
    def get_by_name(self, name: str) -> Page | None:
        pass

    @abstractmethod
    def create(self, name: str, content: str) -> None:
        pass

    @abstractmethod
    def update_content(self, id: int, content: str) -> None:
        pass

    @abstractmethod
    def delete(self, id: int) -> None:
        pass

    @abstractmethod
    def ping(self) -> None:
        pass

    def close(self) -> None:
        pass

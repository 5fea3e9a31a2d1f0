from typing import Any
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import IntegrityError

from markwiki.common.exceptions import (
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ResourceType,
)
from markwiki.pages.schemas import Page
from markwiki.pages.store.base import PageStore
from markwiki.pages.store.sql.model import Base, PageModel


class SqlPageStore(PageStore):
    def __init__(self, database_url: str, pool_size: int = 30):
        engine_kwargs: dict[str, Any] = {"pool_size": pool_size}
        if database_url.startswith("sqlite"):
            # Statements run on threadpool workers, not the creating thread.
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(bind=self.engine)

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def list_names(self) -> list[str]:
        with self.Session() as session:
            rows = session.query(PageModel.name).all()
            return sorted(name for (name,) in rows)

    def get_by_name(self, name: str) -> Page | None:
        with self.Session() as session:
            page = session.query(PageModel).filter_by(name=name).first()
            if not page:
                return None
            return Page(id=page.id, name=page.name, content=page.content)

    def create(self, name: str, content: str) -> None:
        with self.Session() as session:
            try:
                session.add(PageModel(name=name, content=content))
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ResourceAlreadyExistsException(ResourceType.PAGE, name) from e

    def update_content(self, id: int, content: str) -> None:
        with self.Session() as session:
            updated = (
                session.query(PageModel).filter_by(id=id).update({"content": content})
            )
            if not updated:
                session.rollback()
                raise ResourceNotFoundException(ResourceType.PAGE, str(id))
            session.commit()

    def delete(self, id: int) -> None:
        with self.Session() as session:
            session.query(PageModel).filter_by(id=id).delete()
            session.commit()

    def ping(self) -> None:
        with self.engine.connect() as connection:
            result = connection.execute(text("SELECT 1")).scalar()
            if result != 1:
                raise Exception("Database health check failed")

    def close(self) -> None:
        self.engine.dispose()

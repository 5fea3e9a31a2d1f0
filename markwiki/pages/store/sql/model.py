from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

Base = declarative_base()


class PageModel(Base):
    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    def __init__(self, name: str, content: str):
        self.name = name
        self.content = content

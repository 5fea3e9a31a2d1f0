from functools import lru_cache
from typing import Annotated, Any, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    MARKWIKI_VERSION: str = "v0.1.x"
    API_NAME: str = "markwiki"
    API_SUMMARY: str = "A minimal Markdown wiki"

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # HTTP Server
    HTTP_SERVER_HOST: str = "0.0.0.0"
    HTTP_SERVER_PORT: int = 8080
    HTTP_SERVER_INSTANCES: int = 1

    # Message Bus
    MESSAGE_BUS_BACKEND: Literal["local", "celery"] = "local"
    WIKIDB_QUEUE: str = "wikidb.queue"
    BUS_REPLY_TIMEOUT: float = 10.0

    # Database Configuration
    PAGE_STORE_BACKEND: Literal["sql", "redis"] = "sql"
    DATABASE_URL: str = "sqlite:///wiki.db"
    DATABASE_POOL_SIZE: int = 30
    PAGE_STORE_NAMESPACE: str = "wiki"
    REDIS_URL: str = "redis://localhost:6379"

    # Rendering
    EMPTY_PAGE_MARKDOWN: str = "# A new page\n\nFeel-free to write in Markdown!\n"
    MARKDOWN_EXTENSIONS: Annotated[list[str], NoDecode] = ["fenced_code", "tables"]

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("MARKDOWN_EXTENSIONS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()

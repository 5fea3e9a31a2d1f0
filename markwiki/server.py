import logging
import uvicorn

from markwiki.config import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info(f"Starting HTTP server on port {settings.HTTP_SERVER_PORT}")
    uvicorn.run(
        "markwiki.main:app",
        host=settings.HTTP_SERVER_HOST,
        port=settings.HTTP_SERVER_PORT,
        workers=settings.HTTP_SERVER_INSTANCES,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

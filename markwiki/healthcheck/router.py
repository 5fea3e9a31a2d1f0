from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from markwiki.bus.base import MessageBus
from markwiki.pages.store.base import PageStore
from markwiki.web.dependencies import get_message_bus, get_page_store

router = APIRouter()


@router.get(
    "/healthcheck",
    tags=["Healthcheck"],
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Healthcheck status",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "database": {"status": "ok"},
                        "bus": {"status": "ok", "consumers": 1},
                    }
                }
            },
        },
        503: {
            "description": "Service unavailable",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "database": {"status": "error", "message": "Connection error"},
                        "bus": {"status": "error", "message": "No active workers found"},
                    }
                }
            },
        },
    },
)
def healthcheck(
    page_store: PageStore | None = Depends(get_page_store),
    message_bus: MessageBus = Depends(get_message_bus),
) -> JSONResponse:
    health_status: dict[str, Any] = {
        "api": {"status": "ok"},
        "database": {"status": "ok"},
        "bus": {"status": "ok"},
    }
    has_error = False

    # The page store lives in the Celery workers when the bus is distributed
    if page_store is None:
        health_status["database"].update(
            {
                "status": "skipped",
                "message": "The page store is owned by the database workers.",
            }
        )
    else:
        try:
            page_store.ping()
        except Exception as e:
            health_status["database"].update({"status": "error", "message": str(e)})
            has_error = True

    health_status["bus"] = message_bus.health()
    if health_status["bus"]["status"] == "error":
        has_error = True

    if has_error:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status
        )

    return JSONResponse(status_code=status.HTTP_200_OK, content=health_status)

from enum import Enum
import logging
from typing import Any
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ResourceType(str, Enum):
    PAGE = "Page"


class FailureCode(str, Enum):
    ALREADY_EXISTS = "already-exists"
    NOT_FOUND = "not-found"
    UNKNOWN_ACTION = "unknown-action"
    INVALID_MESSAGE = "invalid-message"
    STORE_ERROR = "store-error"
    NO_HANDLERS = "no-handlers"


# Exceptions
class ResourceNotFoundException(Exception):
    failure_code = FailureCode.NOT_FOUND

    def __init__(self, resource_type: ResourceType, identifier: str):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(f"{self.resource_type} '{identifier}' not found")


class ResourceAlreadyExistsException(Exception):
    failure_code = FailureCode.ALREADY_EXISTS

    def __init__(self, resource_type: ResourceType, identifier: str):
        self.resource_type = resource_type.value
        self.identifier = identifier
        super().__init__(f"{self.resource_type} '{identifier}' already exists")


class UnknownActionException(Exception):
    failure_code = FailureCode.UNKNOWN_ACTION

    def __init__(self, action: str | None):
        self.action = action
        super().__init__(f"Unknown action '{action}'")


class InvalidMessageException(Exception):
    failure_code = FailureCode.INVALID_MESSAGE


class DatabaseStartupException(Exception):
    pass


class ReplyFailedException(Exception):
    """A request sent over the message bus was answered with a failure."""

    def __init__(self, code: FailureCode | str, message: str):
        self.code = FailureCode(code)
        self.message = message
        super().__init__(f"[{self.code.value}] {message}")


class BusTimeoutException(Exception):
    def __init__(self, address: str, action: str, timeout: float):
        self.address = address
        self.action = action
        self.timeout = timeout
        super().__init__(
            f"No reply from '{address}' for action '{action}' within {timeout}s"
        )


def failure_code_for(exc: Exception) -> FailureCode:
    return getattr(exc, "failure_code", FailureCode.STORE_ERROR)


# Exception handlers
def reply_failed_handler(request: Request, exc: ReplyFailedException):
    logger.error(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message, "code": exc.code.value},
    )


def bus_timeout_handler(request: Request, exc: BusTimeoutException):
    logger.error(exc)
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content={"detail": "The database service did not reply in time"},
    )


def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):
    def loc_to_dot_sep(loc: tuple[Any, ...]) -> str:
        """Convert a tuple of location parts to a dot-separated string"""
        path = ""
        for i, x in enumerate(loc):
            if isinstance(x, str):
                if i > 0:
                    path += "."
                path += x
            elif isinstance(x, int):
                path += f"[{x}]"
            else:
                raise TypeError("Unexpected type")
        return path

    errors = [
        {**error, "loc": loc_to_dot_sep(error["loc"])} for error in exc.errors()
    ]

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Validation error", "errors": errors},
    )

from typing import Any
from pydantic import BaseModel

from markwiki.common.exceptions import FailureCode, ReplyFailedException


class ReplyEnvelope(BaseModel):
    succeeded: bool
    body: dict[str, Any] | None = None
    failure_code: FailureCode | None = None
    message: str | None = None

    @classmethod
    def success(cls, body: dict[str, Any]) -> "ReplyEnvelope":
        return cls(succeeded=True, body=body)

    @classmethod
    def failure(cls, code: FailureCode, message: str) -> "ReplyEnvelope":
        return cls(succeeded=False, failure_code=code, message=message)

    def unwrap(self) -> dict[str, Any]:
        if not self.succeeded:
            raise ReplyFailedException(
                self.failure_code or FailureCode.STORE_ERROR,
                self.message or "Request failed",
            )
        return self.body or {}

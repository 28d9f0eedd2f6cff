"""
Result envelope returned by every outbound integration call.

Shape: {"success": bool, "data"?: T, "error"?: {"message", "code"?, "retryable"?}}
Route handlers return `envelope.to_body()` so clients can branch on `success`.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

T = TypeVar("T")

INTERNAL_ERROR = "INTERNAL_ERROR"
NOT_FOUND = "NOT_FOUND"


class EnvelopeError(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    code: str | None = None
    retryable: bool | None = None


class Envelope(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True)

    success: bool
    data: T | None = None
    error: EnvelopeError | None = None

    @model_validator(mode="after")
    def _check_branch(self) -> "Envelope[T]":
        if self.success and self.error is not None:
            raise ValueError("Successful envelope cannot carry an error.")
        if not self.success and self.error is None:
            raise ValueError("Failed envelope requires an error.")
        return self

    @classmethod
    def ok(cls, data: Any = None) -> "Envelope[Any]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        message: str,
        *,
        code: str | None = None,
        retryable: bool | None = None,
    ) -> "Envelope[Any]":
        return cls(
            success=False,
            error=EnvelopeError(message=message, code=code, retryable=retryable),
        )

    def to_body(self) -> dict[str, Any]:
        """
        JSON body for an HTTP response.

        `data` is always present on success (even when the upstream sent null);
        unset error fields are dropped.
        """
        if self.success:
            return {"success": True, "data": self.data}
        error = self.error.model_dump(exclude_none=True) if self.error is not None else {}
        return {"success": False, "error": error}


def internal_error() -> Envelope[Any]:
    # Never carries exception detail to the client.
    return Envelope.fail("Internal server error", code=INTERNAL_ERROR)

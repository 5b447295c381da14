from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ApiError(BaseModel):
    code: str | None = None
    message: str | None = None
    details: str | None = None

    def __str__(self) -> str:
        return f"ApiError(code='{self.code}', message='{self.message}', details='{self.details}')"


class ApiResponse(BaseModel):
    """Generic response wrapper. Only ``data`` is passed on to callers."""

    success: bool | None = None
    data: Any = None
    error: ApiError | None = None
    message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None or self.success is False

    @classmethod
    def from_api(cls, payload: Any) -> ApiResponse:
        if not isinstance(payload, dict):
            return cls(data=None)
        raw_error = payload.get("error")
        error = None
        if isinstance(raw_error, dict):
            error = ApiError(
                code=_as_text(raw_error.get("code")),
                message=_as_text(raw_error.get("message")),
                details=_as_text(raw_error.get("details")),
            )
        elif raw_error:
            error = ApiError(message=str(raw_error))
        success = payload.get("success")
        return cls(
            success=success if isinstance(success, bool) else None,
            data=payload.get("data"),
            error=error,
            message=_as_text(payload.get("message")),
        )


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)

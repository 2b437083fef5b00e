from __future__ import annotations

import logging

from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)


class ApiResponse:
    """
    Result of a resource handler, rendered as the JSON envelope
    ``{"success": bool, "data"?, "message"?, "error"?}``.

    Attributes:
        success (bool): Whether the operation succeeded.
        status_code (int): HTTP status to send.
        data: Optional payload (list or dict).
        message (str | None): Human-readable outcome.
        error (str | None): Failure text, used by the weekly endpoint.
        extra (dict): Additional top-level fields, e.g. the id of a created row.
    """

    def __init__(
        self,
        success: bool,
        status_code: int = 200,
        data=None,
        message: str | None = None,
        error: str | None = None,
        extra: dict | None = None,
    ):
        self.success = success
        self.status_code = status_code
        self.data = data
        self.message = message
        self.error = error
        self.extra = extra or {}

    @classmethod
    def succeed(cls, data=None, message: str | None = None, status_code: int = 200, **extra) -> ApiResponse:
        return cls(True, status_code=status_code, data=data, message=message, extra=extra)

    @classmethod
    def fail(cls, message: str | None = None, status_code: int = 400, error: str | None = None) -> ApiResponse:
        return cls(False, status_code=status_code, message=message, error=error)

    def to_dict(self) -> dict:
        body = {"success": self.success}
        if self.data is not None:
            body["data"] = self.data
        if self.message is not None:
            body["message"] = self.message
        if self.error is not None:
            body["error"] = self.error
        body.update(self.extra)
        return body

    def to_json_response(self) -> JSONResponse:
        return JSONResponse(content=self.to_dict(), status_code=self.status_code)

    def __repr__(self) -> str:
        return f"ApiResponse(success={self.success}, status_code={self.status_code})"


def preflight() -> Response:
    return Response(status_code=200)


def dispatch(db, handler, *args, error_field: str = "message") -> JSONResponse:
    """Run a handler, turning anything it did not anticipate into a generic 500."""
    try:
        result = handler(db, *args)
    except Exception:
        logger.exception("Unhandled error in %s", handler.__name__)
        db.rollback()
        result = ApiResponse.fail(status_code=500, **{error_field: "Server error"})
    return result.to_json_response()

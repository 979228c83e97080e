"""Error types raised by controllers and the handlers that render them.

Every error leaves the API as the same JSON body, ``ErrorResponse``:

    {"error": "not_found", "detail": "Event not found", "context": {"event_id": "abc"}}

Controllers raise an ``APIError`` subclass, passing any extra fields as
keyword arguments:

    raise NotFoundError(detail="Event not found", event_id=event_id)

``register_exception_handlers(app)`` wires the handlers into the app.
Schedule engine errors that escape a controller are rendered as 400s, with
the engine error's class name as ``error_code``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from chousei.schedule.errors import ScheduleError

logger = logging.getLogger(__name__)

_ERROR_TYPES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_error",
    500: "internal_error",
    503: "service_unavailable",
}


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None


class APIError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500
    error: str = "internal_error"
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None, error_code: str | None = None, **context: Any) -> None:
        self.detail = detail or type(self).detail
        self.error_code = error_code
        self.context = context or None
        super().__init__(self.detail)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error=self.error,
            detail=self.detail,
            error_code=self.error_code,
            context=self.context,
        )


class NotFoundError(APIError):
    status_code = 404
    error = "not_found"
    detail = "Resource not found"


class BadRequestError(APIError):
    status_code = 400
    error = "bad_request"
    detail = "Invalid request"


class ServiceUnavailableError(APIError):
    status_code = 503
    error = "service_unavailable"
    detail = "Service temporarily unavailable"


class DatabaseError(APIError):
    status_code = 500
    error = "database_error"
    detail = "Database operation failed"


def _status_to_error_type(status_code: int) -> str:
    return _ERROR_TYPES.get(status_code, "error")


def _render(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.warning("%s %s -> %d %s: %s", request.method, request.url.path, exc.status_code, exc.error, exc.detail)
    return _render(exc.status_code, exc.to_response())


async def schedule_error_handler(request: Request, exc: ScheduleError) -> JSONResponse:
    name = type(exc).__name__
    logger.warning("%s %s -> 400 %s: %s", request.method, request.url.path, name, exc)
    body = ErrorResponse(error="bad_request", detail=str(exc), error_code=name, context=exc.context)
    return _render(400, body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = ErrorResponse(error=_status_to_error_type(exc.status_code), detail=str(exc.detail))
    return _render(exc.status_code, body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(ScheduleError, schedule_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

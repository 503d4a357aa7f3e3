# app/backend/core/errors.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class TaskAPIError(Exception):
    """
    Base of the error taxonomy. Rendered as
    {"code": ..., "message": ..., "data": {"status": ...}} with `status_code`.
    """

    status_code: int = 500
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.data = data or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "data": {"status": self.status_code, **self.data},
        }


class Unauthorized(TaskAPIError):
    status_code = 401
    code = "not_logged_in"
    message = "User must be logged in"


class NotFound(TaskAPIError):
    status_code = 404
    code = "task_not_found"
    message = "Task not found or access denied"


class ValidationError(TaskAPIError):
    status_code = 400
    code = "invalid_param"
    message = "Invalid request body"


class NoDataError(ValidationError):
    code = "no_data"
    message = "No data to update"


class StoreError(TaskAPIError):
    status_code = 500
    code = "db_error"
    message = "Database operation failed"


class MethodNotAllowed(TaskAPIError):
    status_code = 405
    code = "method_not_allowed"
    message = "Method not allowed"


class RouteNotFound(TaskAPIError):
    status_code = 404
    code = "no_route"
    message = "No route matches the request"


def error_response(exc: TaskAPIError, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def _task_api_error_handler(request: Request, exc: TaskAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s %s -> %s (%s)", request.method, request.url.path, exc.code, exc.message)
    else:
        log.info("%s %s -> %s", request.method, request.url.path, exc.code)
    return error_response(exc)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing-level failures (unknown path, wrong method) in the same body shape."""
    if exc.status_code == 404:
        err: TaskAPIError = RouteNotFound()
    elif exc.status_code == 405:
        err = MethodNotAllowed()
    else:
        err = TaskAPIError(exc.detail if isinstance(exc.detail, str) else None, code="http_error")
        err.status_code = exc.status_code
    log.info("%s %s -> %s", request.method, request.url.path, err.code)
    return error_response(err, headers=getattr(exc, "headers", None))


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # path parameters are ids; one that does not parse names no task
    if any(e.get("loc", ())[:1] == ("path",) for e in errors):
        return await _task_api_error_handler(request, NotFound())

    first = errors[0] if errors else {}
    field = str(first.get("loc", ("", ""))[-1])
    err = ValidationError(
        f"{field} is required" if first.get("type") == "missing" else first.get("msg"),
        data={"field": field} if field else None,
    )
    return await _task_api_error_handler(request, err)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskAPIError, _task_api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

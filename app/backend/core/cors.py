# app/backend/core/cors.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import Response

from app.backend.core.config import Settings
from app.backend.core.errors import TaskAPIError, error_response

log = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"


def cors_headers(settings: Settings) -> dict[str, str]:
    origin = settings.cors_origin
    headers = {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": f"Content-Type, Authorization, {settings.auth_fallback_header}",
        "Access-Control-Max-Age": "600",
    }
    # Browsers reject credentialed requests against a wildcard origin.
    if origin != "*":
        headers["Access-Control-Allow-Credentials"] = "true"
        headers["Vary"] = "Origin"
    return headers


def install_cors(app: FastAPI, settings: Settings) -> None:
    static_headers = cors_headers(settings)

    @app.middleware("http")
    async def tasks_cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            try:
                response = await call_next(request)
            except Exception:
                log.exception("Unhandled error on %s %s", request.method, request.url.path)
                response = error_response(TaskAPIError())
        for key, value in static_headers.items():
            response.headers[key] = value
        return response

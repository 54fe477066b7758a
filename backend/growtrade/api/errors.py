"""Uniform {"error": message} bodies for every API failure."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _describe(exc: RequestValidationError) -> str:
    """First validation problem as a short client-facing message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    err = errors[0]
    if err.get("type") == "json_invalid":
        return "Invalid request"
    msg = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
    fields = [str(part) for part in err.get("loc", ()) if part != "body"]
    return f"{'.'.join(fields)}: {msg}" if fields else "Invalid request"


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe(exc)
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse({"error": message}, status_code=400)

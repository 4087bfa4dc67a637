from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quotes_api.domain.errors import InvalidInput

_LOG = logging.getLogger("quotes_api.errors")


def error_response(message: str, status_code: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def install_error_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": message}``.

    Request validation failures (malformed JSON body, non-integer path id)
    are client errors and answer 400 instead of FastAPI's default 422.
    Anything not mapped by a router still answers JSON with status 500.
    """

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail), exc.status_code, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(request: Request, exc: RequestValidationError):
        _LOG.warning("%s %s rejected: %s", request.method, request.url.path, exc.errors())
        return error_response(str(InvalidInput()), 400)

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        _LOG.exception("%s %s failed: %s", request.method, request.url.path, exc)
        return error_response(str(exc), 500)

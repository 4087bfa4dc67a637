from __future__ import annotations

import logging
import re
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,128}")
_LOG = logging.getLogger("quotes_api.access")

# JSON-only API: nothing here is meant to be framed, sniffed or cached.
RESPONSE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


def resolve_request_id(incoming: str | None) -> str:
    candidate = (incoming or "").strip()
    return candidate if _VALID_REQUEST_ID.fullmatch(candidate) else uuid4().hex


def outcome(status_code: int) -> str:
    if status_code >= 500:
        return "failed"
    if status_code >= 400:
        return "rejected"
    return "ok"


def install_request_context(app: FastAPI) -> None:
    """Tag each request with an id and log one access line per quote call.

    The line names the route template (``/quotes/{id}``) rather than the raw
    path, so deletes of different ids group together.
    """

    @app.middleware("http")
    async def _request_context(request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started = perf_counter()

        response = await call_next(request)

        response.headers.update(RESPONSE_HEADERS)
        response.headers[REQUEST_ID_HEADER] = request_id

        route = request.scope.get("route")
        _LOG.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "%s %s -> %s %s in %.1fms [%s]",
            request.method,
            getattr(route, "path", request.url.path),
            response.status_code,
            outcome(response.status_code),
            (perf_counter() - started) * 1000.0,
            request_id,
        )
        return response

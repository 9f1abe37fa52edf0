"""
Generic HTTP error and FastAPI exception handlers.

Every failure raised while reading or parsing a body is an :class:`HttpError`
with a machine-readable ``type``.  Responses built from it have a consistent
shape:

    { "error": "<type>", "detail": "<message>" }
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class HttpError(HTTPException):
    """HTTP error carrying a kind string and arbitrary diagnostic fields.

    Extra keyword arguments become attributes, e.g. ``charset``, ``limit``,
    ``length``, ``received``, ``expected``, ``encoding`` or ``body``.
    """

    def __init__(self, status_code: int, detail: str, *, type: str, **fields: Any):
        super().__init__(status_code=status_code, detail=detail)
        self.type = type
        self.expose = status_code < 500
        for key, value in fields.items():
            setattr(self, key, value)

    def __str__(self) -> str:
        return self.detail


def create_error(status_code: int, message: str, *, type: str, **fields: Any) -> HttpError:
    return HttpError(status_code, message, type=type, **fields)


def error_response(exc: HttpError) -> JSONResponse:
    """Render *exc* the way the registered exception handler does."""
    if not exc.expose:
        logger.error("Body parser failure: %s", exc.detail, extra={"error_type": exc.type})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.type, "detail": exc.detail})


# ── Handlers ───────────────────────────────────────────────────────────


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(HttpError)
    async def _http_error(request: Request, exc: HttpError) -> JSONResponse:
        return error_response(exc)

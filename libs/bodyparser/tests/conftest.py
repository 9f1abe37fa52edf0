"""Test fixtures for the JSON body parser."""

import os

os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from bodyparser import JSONBodyParserMiddleware, register_error_handlers


def build_app(*middleware_options: dict) -> FastAPI:
    """Echo app; each options dict adds one parser middleware (last one outermost)."""
    app = FastAPI()
    for options in middleware_options or ({},):
        app.add_middleware(JSONBodyParserMiddleware, **options)
    register_error_handlers(app)

    @app.api_route("/", methods=["GET", "POST", "PUT", "DELETE"])
    async def echo(request: Request):
        raw = await request.body()
        return {"body": request.state.body, "raw_length": len(raw)}

    return app


@pytest.fixture
def make_client():
    def _make(**options) -> TestClient:
        return TestClient(build_app(options))

    return _make


@pytest.fixture
def make_stacked_client():
    def _make(*middleware_options: dict) -> TestClient:
        return TestClient(build_app(*middleware_options))

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def make_request():
    """Build a Starlette request over a hand-written ASGI receive channel.

    *chunks* are delivered as successive ``http.request`` messages; with
    ``disconnect=True`` the client goes away before the last chunk is flagged
    as final.
    """
    from starlette.requests import Request as StarletteRequest

    def _make(chunks=(), headers=None, disconnect: bool = False, state: dict | None = None):
        chunks = list(chunks)
        messages = []
        for i, chunk in enumerate(chunks):
            last = i == len(chunks) - 1
            messages.append({"type": "http.request", "body": chunk, "more_body": disconnect or not last})
        if disconnect:
            messages.append({"type": "http.disconnect"})

        async def receive():
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        scope = {
            "type": "http",
            "method": "POST",
            "path": "/",
            "query_string": b"",
            "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
            "state": dict(state or {}),
        }
        return StarletteRequest(scope, receive)

    return _make

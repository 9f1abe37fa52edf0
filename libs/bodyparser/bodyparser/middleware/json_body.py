"""
JSON body parsing middleware.

Parses matching request bodies with :class:`~bodyparser.json_parser.JsonParser`
before the application runs; route handlers read the result from
``request.state.body``.  The body bytes consumed while parsing are replayed
to the wrapped application, so ``await request.body()`` keeps working.

Failures short-circuit with the standard error shape (see
:func:`bodyparser.errors.error_response`) and the application is never
called.
"""

from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from bodyparser.errors import HttpError, error_response
from bodyparser.json_parser import JsonParser


class JSONBodyParserMiddleware:
    def __init__(self, app: ASGIApp, **options: Any):
        self.app = app
        self.parser = JsonParser(**options)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        consumed: list[Message] = []

        async def recording_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                consumed.append(message)
            return message

        try:
            await self.parser(Request(scope, recording_receive))
        except HttpError as exc:
            response = error_response(exc)
            await response(scope, receive, send)
            return

        if not consumed:
            await self.app(scope, receive, send)
            return

        async def replay_receive() -> Message:
            if consumed:
                return consumed.pop(0)
            return await receive()

        await self.app(scope, replay_receive, send)

"""
FastAPI dependency flavour of the JSON body parser.

    @router.post("/items")
    async def create_item(body: dict = Depends(json_body(limit="10kb"))):
        ...

Errors propagate as :class:`~bodyparser.errors.HttpError` and are rendered by
the handlers installed with :func:`bodyparser.errors.register_error_handlers`.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import Request

from bodyparser.json_parser import JsonParser


def json_body(**options: Any) -> Callable[[Request], Awaitable[Any]]:
    parser = JsonParser(**options)

    async def dependency(request: Request) -> Any:
        await parser(request)
        return request.state.body

    return dependency

"""JSON request body parsing for Starlette / FastAPI applications."""

from bodyparser.dependencies import json_body
from bodyparser.errors import HttpError, create_error, error_response, register_error_handlers
from bodyparser.json_parser import OMIT, JsonParser, JsonParserOptions, json_parser
from bodyparser.logging import setup_logging
from bodyparser.middleware import JSONBodyParserMiddleware

__all__ = [
    "HttpError",
    "JSONBodyParserMiddleware",
    "JsonParser",
    "JsonParserOptions",
    "OMIT",
    "create_error",
    "error_response",
    "json_body",
    "json_parser",
    "register_error_handlers",
    "setup_logging",
]

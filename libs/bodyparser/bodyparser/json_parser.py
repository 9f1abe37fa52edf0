"""
JSON body parser.

:class:`JsonParser` is built once from its options and then awaited once per
request::

    parser = JsonParser(limit="1mb", strict=True)
    await parser(request)          # request.state.body now holds the value

Requests that already carry a parsed body, carry no body at all, or whose
content type does not match are passed over untouched (``request.state.body``
defaults to ``{}``).  Every failure is raised as an
:class:`~bodyparser.errors.HttpError`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Union

from pydantic import BaseModel, ConfigDict, field_validator
from starlette.requests import Request

from bodyparser import bytes as bytes_
from bodyparser import config
from bodyparser.errors import HttpError, create_error
from bodyparser.media_type import get_charset, has_body, type_is
from bodyparser.reader import read_body

TypePredicate = Callable[[Request], bool]
Reviver = Callable[[Any, Any], Any]


class _Omit:
    def __repr__(self) -> str:
        return "OMIT"


OMIT = _Omit()
"""Returned from a reviver to drop an object member (array elements become ``None``)."""


class JsonParserOptions(BaseModel):
    """Immutable, validated parser configuration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    limit: int = bytes_.parse(config.JSON_BODY_LIMIT)
    inflate: bool = config.JSON_BODY_INFLATE
    strict: bool = config.JSON_BODY_STRICT
    type: Union[str, list[str], Callable[..., Any]] = "application/json"
    verify: Any = False
    reviver: Any = None

    @field_validator("limit", mode="before")
    @classmethod
    def _parse_limit(cls, v: Any) -> int:
        return bytes_.parse(config.JSON_BODY_LIMIT if v is None else v)

    @field_validator("inflate", mode="before")
    @classmethod
    def _default_inflate(cls, v: Any) -> Any:
        return config.JSON_BODY_INFLATE if v is None else v

    @field_validator("strict", mode="before")
    @classmethod
    def _default_strict(cls, v: Any) -> Any:
        return config.JSON_BODY_STRICT if v is None else v

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, v: Any) -> Any:
        return "application/json" if v is None else v

    @field_validator("verify")
    @classmethod
    def _check_verify(cls, v: Any) -> Any:
        if v is None or v is False:
            return False
        if not callable(v):
            raise ValueError("option verify must be function")
        return v

    @field_validator("reviver")
    @classmethod
    def _check_reviver(cls, v: Any) -> Any:
        if v is not None and not callable(v):
            raise ValueError("option reviver must be function")
        return v


def _type_checker(types: str | list[str]) -> TypePredicate:
    def should_parse(request: Request) -> bool:
        return type_is(request.headers, types) is not None

    return should_parse


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name[0]!r} in JSON")


def _revive(holder: Any, key: Any, reviver: Reviver) -> Any:
    value = holder[key]
    if isinstance(value, dict):
        for k in list(value):
            revived = _revive(value, k, reviver)
            if revived is OMIT:
                del value[k]
            else:
                value[k] = revived
    elif isinstance(value, list):
        for i in range(len(value)):
            revived = _revive(value, i, reviver)
            value[i] = None if revived is OMIT else revived
    return reviver(key, value)


def _first_char(text: str) -> tuple[str, int] | None:
    stripped = text.lstrip()
    if not stripped:
        return None
    return stripped[0], len(text) - len(stripped)


def _strict_violation(text: str, char: str, index: int) -> json.JSONDecodeError:
    return json.JSONDecodeError(f"Unexpected token {char!r}", text, index)


def _parse_failed(exc: Exception, text: str) -> HttpError:
    return create_error(400, str(exc), type="entity.parse.failed", body=text)


class JsonParser:
    """Per-request JSON body parser; see the module docstring."""

    def __init__(self, *, logger: logging.Logger | None = None, **options: Any):
        self.options = JsonParserOptions(**options)
        self.logger = logger or logging.getLogger(__name__)

        type_ = self.options.type
        self.should_parse: TypePredicate = type_ if callable(type_) else _type_checker(type_)

    def parse(self, text: str) -> Any:
        if len(text) == 0:
            # empty body is a common client mistake, treat it as an empty object
            return {}

        if self.options.strict:
            first = _first_char(text)
            if first is not None and first[0] not in "{[":
                self.logger.debug("strict violation", extra={"first_char": first[0], "position": first[1]})
                raise _parse_failed(_strict_violation(text, *first), text)

        self.logger.debug("parse json", extra={"body_length": len(text)})
        try:
            value = json.loads(text, parse_constant=_reject_constant)
            if self.options.reviver is not None:
                value = _revive({"": value}, "", self.options.reviver)
                if value is OMIT:
                    value = None
        except Exception as exc:
            raise _parse_failed(exc, text) from None
        return value

    async def __call__(self, request: Request) -> None:
        state = request.state
        if getattr(state, "body_parsed", False):
            self.logger.debug("body already parsed")
            return

        if not hasattr(state, "body"):
            state.body = {}

        if not has_body(request.headers):
            self.logger.debug("skip empty body")
            return

        content_type = request.headers.get("content-type")
        self.logger.debug("content-type %r", content_type, extra={"content_type": content_type})

        if not self.should_parse(request):
            self.logger.debug("skip parsing", extra={"content_type": content_type})
            return

        # RFC 7159 sec 8.1
        charset = get_charset(request.headers) or "utf-8"
        if not charset.startswith("utf-"):
            self.logger.debug("invalid charset", extra={"charset": charset})
            raise create_error(
                415,
                f'unsupported charset "{charset.upper()}"',
                type="charset.unsupported",
                charset=charset,
            )

        verify = self.options.verify or None
        text = await read_body(
            request,
            encoding=charset,
            inflate=self.options.inflate,
            limit=self.options.limit,
            verify=verify,
        )

        state.body = self.parse(text)
        state.body_parsed = True


def json_parser(**options: Any) -> JsonParser:
    return JsonParser(**options)


__all__ = ["JsonParser", "JsonParserOptions", "OMIT", "json_parser"]

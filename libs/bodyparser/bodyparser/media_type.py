"""
Media-type helpers.

* :func:`parse_content_type` splits a ``Content-Type`` header into the
  lowercased ``type/subtype`` and its parameters (RFC 7231 §3.1.1.1).
* :func:`type_is` matches a request's content type against a list of
  expected types, accepting shorthands (``"json"``), suffix forms
  (``"+json"``, ``"application/*+json"``) and wildcards (``"*/*"``).
* :func:`has_body` tells whether a request carries a message body at all.
"""

from __future__ import annotations

import mimetypes
import re
from typing import Iterable, Mapping

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_TYPE_RE = re.compile(rf"^{_TOKEN}/{_TOKEN}$")
_PARAM_RE = re.compile(rf';[ \t]*({_TOKEN})[ \t]*=[ \t]*("(?:[\t\x20\x21\x23-\x5b\x5d-\x7e\x80-\xff]|\\[\t\x20-\x7e\x80-\xff])*"|{_TOKEN})[ \t]*')
_QUOTED_PAIR_RE = re.compile(r"\\([\t\x20-\x7e\x80-\xff])")

_SHORTHANDS = {
    "urlencoded": "application/x-www-form-urlencoded",
    "multipart": "multipart/*",
}


def parse_content_type(header: str) -> tuple[str, dict[str, str]]:
    """Parse a ``Content-Type`` value, raising ``ValueError`` when malformed."""
    index = header.find(";")
    media = (header[:index] if index != -1 else header).strip()
    if not _TYPE_RE.match(media):
        raise ValueError(f"invalid media type: {header!r}")

    params: dict[str, str] = {}
    if index != -1:
        rest = header[index:]
        pos = 0
        while pos < len(rest):
            match = _PARAM_RE.match(rest, pos)
            if match is None:
                raise ValueError(f"invalid parameter format: {header!r}")
            pos = match.end()
            name, value = match.group(1).lower(), match.group(2)
            if value.startswith('"'):
                value = _QUOTED_PAIR_RE.sub(r"\1", value[1:-1])
            params[name] = value

    return media.lower(), params


def get_charset(headers: Mapping[str, str]) -> str | None:
    """Lowercased ``charset`` parameter, ``None`` when absent or unparsable."""
    header = headers.get("content-type")
    if header is None:
        return None
    try:
        _, params = parse_content_type(header)
    except ValueError:
        return None
    return params.get("charset", "").lower() or None


def has_body(headers: Mapping[str, str]) -> bool:
    if headers.get("transfer-encoding") is not None:
        return True
    length = headers.get("content-length")
    if length is None:
        return False
    try:
        int(length.strip())
    except ValueError:
        return False
    return True


def normalize(type_: str) -> str | None:
    if type_ in _SHORTHANDS:
        return _SHORTHANDS[type_]
    if type_.startswith("+"):
        return "*/*" + type_
    if "/" in type_:
        return type_
    return mimetypes.types_map.get("." + type_.lower())


def mime_match(expected: str | None, actual: str) -> bool:
    if expected is None:
        return False

    actual_parts = actual.split("/")
    expected_parts = expected.split("/")
    if len(actual_parts) != 2 or len(expected_parts) != 2:
        return False

    if expected_parts[0] != "*" and expected_parts[0] != actual_parts[0]:
        return False

    # "*+json" style suffix
    if expected_parts[1].startswith("*+"):
        suffix = expected_parts[1][1:]
        return len(actual_parts[1]) >= len(suffix) and actual_parts[1].endswith(suffix)

    if expected_parts[1] != "*" and expected_parts[1] != actual_parts[1]:
        return False

    return True


def type_is(headers: Mapping[str, str], types: str | Iterable[str]) -> str | None:
    """Return the first of *types* matching the request's content type."""
    header = headers.get("content-type")
    if not header:
        return None
    try:
        actual, _ = parse_content_type(header)
    except ValueError:
        return None

    if isinstance(types, str):
        types = [types]
    for type_ in types:
        if mime_match(normalize(type_), actual):
            return type_
    return None

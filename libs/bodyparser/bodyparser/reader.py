"""
Streaming request body reader.

Consumes ``request.stream()`` chunk by chunk, inflating ``gzip``/``deflate``
bodies on the fly, and enforces:

* the byte limit (checked against ``Content-Length`` up front, then against
  the running count of decoded bytes),
* consistency between the declared length and the bytes actually received,
* the caller's ``verify`` hook on the raw buffer,

before decoding the buffer to text with the requested charset.
"""

from __future__ import annotations

import codecs
import inspect
import logging
import zlib
from typing import Any, Callable

from starlette.requests import ClientDisconnect, Request

from bodyparser.errors import HttpError, create_error

logger = logging.getLogger(__name__)

VerifyCallback = Callable[[Request, bytes, str], Any]

# zlib window sizes: zlib-wrapped deflate vs. gzip container
_DEFLATE_WBITS = zlib.MAX_WBITS
_GZIP_WBITS = 16 + zlib.MAX_WBITS

_WBITS = {
    "deflate": _DEFLATE_WBITS,
    "gzip": _GZIP_WBITS,
    "x-gzip": _GZIP_WBITS,
}

_INFLATE_CHUNK = 64 * 1024


def _declared_length(request: Request) -> int | None:
    value = request.headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _inflate_wbits(request: Request, inflate: bool) -> int | None:
    """Return the zlib window size for the request's content encoding, or ``None`` for identity."""
    encoding = request.headers.get("content-encoding", "identity").strip().lower()

    if not inflate and encoding != "identity":
        raise create_error(415, "content encoding unsupported", type="encoding.unsupported", encoding=encoding)

    if encoding == "identity":
        return None
    if encoding not in _WBITS:
        raise create_error(
            415,
            f'unsupported content encoding "{encoding}"',
            type="encoding.unsupported",
            encoding=encoding,
        )

    logger.debug("inflate body", extra={"content_encoding": encoding})
    return _WBITS[encoding]


def _check_encoding(encoding: str) -> None:
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise create_error(
            415,
            f'unsupported charset "{encoding.upper()}"',
            type="charset.unsupported",
            charset=encoding.lower(),
        ) from None


def _verify_status(exc: Exception) -> int:
    status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
    if isinstance(status, int) and 400 <= status < 600:
        return status
    return 403


async def read_body(
    request: Request,
    *,
    encoding: str = "utf-8",
    inflate: bool = True,
    limit: int | None = None,
    verify: VerifyCallback | None = None,
) -> str:
    """Read the whole body of *request* and return it decoded as text.

    Every failure is raised as an :class:`~bodyparser.errors.HttpError`.
    """
    _check_encoding(encoding)
    wbits = _inflate_wbits(request, inflate)
    decompressor = zlib.decompressobj(wbits) if wbits is not None else None

    # Content-Length describes the compressed stream, not what we buffer
    length = _declared_length(request) if decompressor is None else None

    if limit is not None and length is not None and length > limit:
        raise create_error(
            413,
            "request entity too large",
            type="entity.too.large",
            expected=length,
            length=length,
            limit=limit,
        )

    received = 0
    buffer = bytearray()

    def _append(data: bytes) -> None:
        buffer.extend(data)
        if limit is not None and len(buffer) > limit:
            raise create_error(
                413,
                "request entity too large",
                type="entity.too.large",
                length=len(buffer),
                limit=limit,
                received=len(buffer),
            )

    def _inflate(data: bytes) -> None:
        nonlocal decompressor
        while data:
            if decompressor.eof:
                # a gzip body may hold several members (RFC 1952 §2.2)
                if wbits != _GZIP_WBITS:
                    return
                decompressor = zlib.decompressobj(wbits)
            # at most _INFLATE_CHUNK bytes per step, the rest stays in unconsumed_tail
            try:
                _append(decompressor.decompress(data, _INFLATE_CHUNK))
            except zlib.error as exc:
                raise create_error(400, str(exc), type="entity.parse.failed") from None
            data = decompressor.unconsumed_tail or (decompressor.unused_data if decompressor.eof else b"")

    try:
        async for chunk in request.stream():
            if isinstance(chunk, str):
                raise create_error(500, "stream encoding should not be set", type="stream.encoding.set")
            if not chunk:
                continue
            received += len(chunk)
            if decompressor is None:
                _append(chunk)
            else:
                _inflate(chunk)
    except ClientDisconnect:
        raise create_error(
            400,
            "request aborted",
            type="request.aborted",
            expected=length,
            length=length,
            received=received,
        ) from None

    if length is not None and received != length:
        raise create_error(
            400,
            "request size did not match content length",
            type="request.size.invalid",
            expected=length,
            length=length,
            received=received,
        )

    if decompressor is not None:
        try:
            _append(decompressor.flush())
            if decompressor.eof and decompressor.unused_data:
                _inflate(decompressor.unused_data)
                _append(decompressor.flush())
        except zlib.error as exc:
            raise create_error(400, str(exc), type="entity.parse.failed") from None
        if received and not decompressor.eof:
            raise create_error(400, "unexpected end of file", type="entity.parse.failed")

    raw = bytes(buffer)

    if verify is not None:
        logger.debug("verify body", extra={"body_length": len(raw)})
        try:
            result = verify(request, raw, encoding)
            if inspect.isawaitable(result):
                await result
        except HttpError:
            raise
        except Exception as exc:
            raise create_error(
                _verify_status(exc),
                str(exc) or "verify failed",
                type=getattr(exc, "type", "entity.verify.failed"),
                body=raw.decode(encoding, errors="replace"),
            ) from exc

    text = raw.decode(encoding, errors="replace")
    if text.startswith("\ufeff"):
        text = text[1:]
    return text

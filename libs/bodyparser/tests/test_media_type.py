"""Unit tests – media-type parsing and matching."""

import pytest

from bodyparser.media_type import get_charset, has_body, mime_match, normalize, parse_content_type, type_is


def test_parse_content_type():
    assert parse_content_type("Application/JSON; Charset=UTF-8") == ("application/json", {"charset": "UTF-8"})


def test_parse_quoted_parameter():
    media, params = parse_content_type('text/plain; foo="bar \\"baz\\""; charset=utf-8')
    assert media == "text/plain"
    assert params == {"foo": 'bar "baz"', "charset": "utf-8"}


@pytest.mark.parametrize("header", ["", "json", "application/json;", "application/json; charset", "a/b/c"])
def test_parse_invalid(header):
    with pytest.raises(ValueError):
        parse_content_type(header)


def test_get_charset():
    assert get_charset({"content-type": "application/json; charset=UTF-16"}) == "utf-16"
    assert get_charset({"content-type": "application/json"}) is None
    assert get_charset({"content-type": "application/json; charset"}) is None
    assert get_charset({}) is None


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({}, False),
        ({"content-length": "0"}, True),
        ({"content-length": "12"}, True),
        ({"content-length": "twelve"}, False),
        ({"transfer-encoding": "chunked"}, True),
    ],
)
def test_has_body(headers, expected):
    assert has_body(headers) is expected


def test_normalize():
    assert normalize("json") == "application/json"
    assert normalize("urlencoded") == "application/x-www-form-urlencoded"
    assert normalize("multipart") == "multipart/*"
    assert normalize("+json") == "*/*+json"
    assert normalize("text/html") == "text/html"
    assert normalize("no-such-extension") is None


def test_mime_match():
    assert mime_match("application/json", "application/json")
    assert mime_match("*/json", "application/json")
    assert mime_match("application/*", "application/json")
    assert mime_match("*/*+json", "application/ld+json")
    assert not mime_match("*/*+json", "application/json")
    assert not mime_match("text/*", "application/json")
    assert not mime_match(None, "application/json")


def test_type_is_returns_first_match():
    headers = {"content-type": "application/json; charset=utf-8"}
    assert type_is(headers, ["text/html", "json", "application/*"]) == "json"
    assert type_is(headers, "text/html") is None
    assert type_is({}, "json") is None

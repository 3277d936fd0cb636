"""Tests for upstream URL construction."""

import pytest

from core.exceptions import ConfigurationError
from core.urls import UpstreamTarget, backend_origin, normalize_base_url, resolve_image_url


@pytest.mark.parametrize(
    "raw",
    [
        "https://example.com",
        "https://example.com/",
        "https://example.com/api",
        "https://example.com/api/",
        "  https://example.com/api//  ",
        "https://example.com/api/api",
    ],
)
def test_normalize_base_url_ends_in_single_api(raw: str) -> None:
    assert normalize_base_url(raw) == "https://example.com/api"


def test_normalize_keeps_deeper_prefix() -> None:
    assert normalize_base_url("https://example.com/v2/") == "https://example.com/v2/api"


@pytest.mark.parametrize("raw", ["", "   ", "/api", "/api/"])
def test_normalize_rejects_empty_base(raw: str) -> None:
    with pytest.raises(ConfigurationError):
        normalize_base_url(raw)


@pytest.mark.parametrize("raw", ["https://example.com", "https://example.com/api/"])
@pytest.mark.parametrize(
    ("segments", "query", "expected"),
    [
        (("parties", "42"), "", "https://example.com/api/parties/42"),
        (("products",), "page=2&limit=10", "https://example.com/api/products?page=2&limit=10"),
        ((), "", "https://example.com/api"),
        ((), "q=1", "https://example.com/api?q=1"),
    ],
)
def test_url_for(raw: str, segments: tuple[str, ...], query: str, expected: str) -> None:
    target = UpstreamTarget.from_base_url(raw)
    assert target.url_for(segments, query) == expected


def test_url_for_passes_query_verbatim() -> None:
    target = UpstreamTarget.from_base_url("https://example.com")
    url = target.url_for(["search"], "q=a%20b&tag=x&tag=y")
    assert url == "https://example.com/api/search?q=a%20b&tag=x&tag=y"


def test_backend_origin_strips_api() -> None:
    assert backend_origin("https://example.com/api/") == "https://example.com"
    assert backend_origin("https://example.com") == "https://example.com"


@pytest.mark.parametrize(
    ("image_url", "expected"),
    [
        ("/uploads/x.png", "https://example.com/uploads/x.png"),
        ("/api/images/7", "https://example.com/api/images/7"),
        ("/static/a.jpg", "https://example.com/static/a.jpg"),
        ("uploads/x.png", "https://example.com/uploads/x.png"),
        ("https://cdn.example.org/a.png", "https://cdn.example.org/a.png"),
        ("http://cdn.example.org/a.png", "http://cdn.example.org/a.png"),
    ],
)
def test_resolve_image_url(image_url: str, expected: str) -> None:
    assert resolve_image_url(image_url, "https://example.com/api") == expected


@pytest.mark.parametrize(
    ("segments", "expected"),
    [
        (("search", "what?x#y"), "https://example.com/api/search/what%3Fx%23y?page=1"),
        (("files", "a/b"), "https://example.com/api/files/a%2Fb?page=1"),
        (("products", "red frame"), "https://example.com/api/products/red%20frame?page=1"),
        (("users", "me@shop:1"), "https://example.com/api/users/me@shop:1?page=1"),
    ],
)
def test_url_for_escapes_reserved_characters_in_segments(
    segments: tuple[str, ...], expected: str
) -> None:
    target = UpstreamTarget.from_base_url("https://example.com")
    assert target.url_for(segments, "page=1") == expected

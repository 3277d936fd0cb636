"""Upstream URL normalization and construction."""

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

from core.exceptions import ConfigurationError

API_SUFFIX = "/api"
# RFC 3986 pchar minus unreserved; "/", "?" and "#" inside a segment are re-escaped
PATH_SAFE = "!$&'()*+,;=:@"


def _strip_api_suffix(url: str) -> str:
    """Trim whitespace, trailing slashes and any number of trailing /api segments."""
    url = url.strip().rstrip("/")
    while url.endswith(API_SUFFIX):
        url = url[: -len(API_SUFFIX)].rstrip("/")
    return url


def normalize_base_url(raw: str) -> str:
    """Return the base URL ending in exactly one /api segment."""
    origin = _strip_api_suffix(raw)
    if not origin:
        raise ConfigurationError(f"Invalid upstream base URL: {raw!r}")
    return origin + API_SUFFIX


def backend_origin(raw: str) -> str:
    """Return the backend host without the /api segment."""
    origin = _strip_api_suffix(raw)
    if not origin:
        raise ConfigurationError(f"Invalid upstream base URL: {raw!r}")
    return origin


def resolve_image_url(image_url: str, base_url: str) -> str:
    """Resolve a possibly relative image URL against the backend origin.

    /api and /uploads paths live under the origin, not under the API base.
    """
    if image_url.startswith(("http://", "https://")):
        return image_url
    origin = backend_origin(base_url)
    if image_url.startswith(("/api", "/uploads")):
        return f"{origin}{image_url}"
    separator = "" if image_url.startswith("/") else "/"
    return f"{origin}{separator}{image_url}"


@dataclass(frozen=True)
class UpstreamTarget:
    """Normalized upstream API base."""

    base_url: str

    @classmethod
    def from_base_url(cls, raw: str) -> "UpstreamTarget":
        return cls(normalize_base_url(raw))

    def url_for(self, path_segments: Sequence[str], query: str = "") -> str:
        """Build the upstream URL for the given path segments and raw query."""
        path = "/".join(quote(segment, safe=PATH_SAFE) for segment in path_segments)
        url = f"{self.base_url}/{path}" if path else self.base_url
        if query:
            url = f"{url}?{query}"
        return url

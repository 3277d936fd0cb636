"""Shared request and response data types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class BodyKind(str, Enum):
    """How an inbound body is handed to the upstream."""

    JSON = "json"
    MULTIPART = "multipart"
    RAW = "raw"
    EMPTY = "empty"

    @classmethod
    def classify(cls, method: str, content_type: str, body: Any) -> "BodyKind":
        """Pick the body kind from method, inbound content-type and body.

        A multipart form stays multipart even with no parts.
        """
        if method.upper() in BODYLESS_METHODS or body is None:
            return cls.EMPTY
        content_type = content_type.lower()
        if isinstance(body, MultipartBody):
            return cls.MULTIPART if "multipart/form-data" in content_type else cls.EMPTY
        if not body:
            return cls.EMPTY
        if "application/json" in content_type:
            return cls.JSON
        return cls.RAW


class ResponseKind(str, Enum):
    """How a response body should be rendered to the caller."""

    JSON = "json"
    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class MultipartBody:
    """Parsed multipart form, re-serialized by the outbound client."""

    fields: list[tuple[str, str]] = field(default_factory=list)
    # (field name, filename, content, content type)
    files: list[tuple[str, str | None, bytes, str | None]] = field(default_factory=list)

    def to_httpx_files(self) -> list[tuple[str, tuple[Any, ...]]]:
        """Encode fields and files as httpx multipart parts.

        Plain fields are sent as filename-less parts so a form without
        uploads still goes out as multipart/form-data.
        """
        parts: list[tuple[str, tuple[Any, ...]]] = [
            (name, (None, value)) for name, value in self.fields
        ]
        for name, filename, content, content_type in self.files:
            if content_type:
                parts.append((name, (filename, content, content_type)))
            else:
                parts.append((name, (filename, content)))
        return parts


@dataclass(frozen=True)
class ForwardRequest:
    """One inbound request, reduced to what gets forwarded."""

    method: str
    path_segments: tuple[str, ...] = ()
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: str | MultipartBody | None = None

    @property
    def path(self) -> str:
        return "/".join(self.path_segments)

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def body_kind(self) -> BodyKind:
        return BodyKind.classify(self.method, self.content_type, self.body)


@dataclass(frozen=True)
class ForwardResponse:
    """Upstream response translated for the caller."""

    status_code: int
    content_type: str
    body: Any
    kind: ResponseKind = ResponseKind.JSON
    headers: dict[str, str] = field(default_factory=dict)

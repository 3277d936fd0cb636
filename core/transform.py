"""Upstream response translation."""

import json
from typing import Any

import httpx

from core.request_types import ForwardResponse, ResponseKind

PROXY_FAILURE_MESSAGE = "Failed to proxy request to backend"


def response_kind(content_type: str) -> ResponseKind:
    """Classify an upstream content-type."""
    content_type = content_type.lower()
    if "application/json" in content_type or "+json" in content_type:
        return ResponseKind.JSON
    if not content_type or content_type.startswith("text/"):
        return ResponseKind.TEXT
    return ResponseKind.BINARY


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and cannot be re-encoded for the caller
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_json_or_text(text: str) -> Any:
    """Parse text as JSON, falling back to the raw text."""
    if not text:
        return None
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def translate_response(response: httpx.Response) -> ForwardResponse:
    """Translate an upstream response, keeping its status code as-is."""
    content_type = response.headers.get("content-type", "")
    kind = response_kind(content_type)

    if kind is ResponseKind.JSON:
        body = parse_json_or_text(response.text)
    elif kind is ResponseKind.TEXT:
        body = response.text
    else:
        body = response.content

    return ForwardResponse(
        status_code=response.status_code,
        content_type=content_type,
        body=body,
        kind=kind,
    )


def transport_failure(error: Exception) -> ForwardResponse:
    """Build the uniform 500 envelope for an unreachable upstream."""
    return ForwardResponse(
        status_code=500,
        content_type="application/json",
        body={
            "error": str(error) or "Internal server error",
            "message": PROXY_FAILURE_MESSAGE,
        },
    )

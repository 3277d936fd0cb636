"""Header construction for upstream requests."""

from collections.abc import Mapping

from core.request_types import BodyKind

# Inbound headers kept on ForwardRequest
FORWARDED_HEADERS = ("authorization", "content-type")


def select_forward_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Keep only the inbound headers the forwarder looks at, lower-cased."""
    selected: dict[str, str] = {}
    for key, value in headers.items():
        key_lower = key.lower()
        if key_lower in FORWARDED_HEADERS and value:
            selected[key_lower] = str(value)
    return selected


def encode_header_values(headers: Mapping[str, str]) -> dict[str, bytes]:
    """Encode header values back to the latin-1 bytes they arrived as.

    Raises UnicodeEncodeError for characters above U+00FF.
    """
    return {key: value.encode("latin-1") for key, value in headers.items()}


class HeaderBuilder:
    """Build outbound headers for the upstream API."""

    def build(self, headers: Mapping[str, str], body_kind: BodyKind) -> dict[str, str]:
        """Pass through authorization and pick the outbound content-type.

        Multipart bodies get no content-type so the client can set the
        boundary itself.
        """
        upstream: dict[str, str] = {}
        authorization = headers.get("authorization")
        if authorization:
            upstream["Authorization"] = authorization
        if body_kind is BodyKind.MULTIPART:
            return upstream

        inbound_type = headers.get("content-type", "")
        if body_kind is BodyKind.RAW and inbound_type.lower().startswith("text/"):
            upstream["Content-Type"] = inbound_type
        else:
            upstream["Content-Type"] = "application/json"
        return upstream

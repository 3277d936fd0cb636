"""Shared protocol definitions."""

from typing import Any, Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_forward(self, method: str, url: str) -> None: ...
    def log_body(self, method: str, path: str, body: Any) -> None: ...
    def log_image(self, url: str) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...

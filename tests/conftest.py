"""Shared fixtures for proxy tests."""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from core.config import Config, UpstreamSettings
from core.urls import UpstreamTarget
from services.forwarder import ProxyForwarder
from services.image_fetcher import ImageFetcher

BASE_URL = "https://example.com/"


class RecordingLogger:
    """RequestLogger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.forwards: list[tuple[str, str]] = []
        self.bodies: list[tuple[str, str, Any]] = []
        self.images: list[str] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_forward(self, method: str, url: str) -> None:
        self.forwards.append((method, url))

    def log_body(self, method: str, path: str, body: Any) -> None:
        self.bodies.append((method, path, body))

    def log_image(self, url: str) -> None:
        self.images.append(url)

    def log_error(self, route: str, status: int, message: str) -> None:
        self.errors.append((route, status, message))


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def config() -> Config:
    return Config(upstream=UpstreamSettings(base_url=BASE_URL))


@pytest.fixture
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Real httpx client for respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def forwarder(
    http_client: httpx.AsyncClient,
    config: Config,
    logger: RecordingLogger,
) -> ProxyForwarder:
    return ProxyForwarder(
        http_client,
        UpstreamTarget.from_base_url(config.upstream.base_url),
        logger,
        diagnostics=config.diagnostics,
    )


@pytest.fixture
def image_fetcher(
    http_client: httpx.AsyncClient,
    logger: RecordingLogger,
) -> ImageFetcher:
    return ImageFetcher(http_client, "https://example.com/api", logger)

"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_fetch_image, handle_health, handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.urls import UpstreamTarget
from services.forwarder import ProxyForwarder
from services.image_fetcher import ImageFetcher

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def create_app(config: Config, logger: RequestLogger) -> FastAPI:
    """Create and configure the FastAPI application."""
    # Fail at startup, not on the first request
    target = UpstreamTarget.from_base_url(config.upstream.base_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            follow_redirects=True,
        )
        app.state.forwarder = ProxyForwarder(
            client,
            target,
            logger,
            header_builder=HeaderBuilder(),
            diagnostics=config.diagnostics,
            timeout=config.upstream.timeout,
        )
        app.state.image_fetcher = ImageFetcher(
            client,
            config.upstream.base_url,
            logger,
            settings=config.images,
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Storefront API Proxy", version="0.1.0", lifespan=lifespan)

    @app.get("/healthz")
    async def health(request: Request):
        return await handle_health(request)

    # Registered before the wildcard so it is not forwarded upstream
    @app.get("/api/fetch-image")
    async def fetch_image(request: Request):
        return await handle_fetch_image(request)

    @app.api_route("/api/{path:path}", methods=PROXY_METHODS)
    async def proxy_api(request: Request, path: str):
        return await handle_proxy(request, path, logger)

    return app

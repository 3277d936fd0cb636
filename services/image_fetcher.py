"""Server-side image fetching for the storefront."""

import httpx

from core.config import ImageSettings
from core.exceptions import BadRequestInput, UpstreamTransportError
from core.protocols import RequestLogger
from core.request_types import ForwardResponse, ResponseKind
from core.urls import resolve_image_url

DEFAULT_IMAGE_TYPE = "image/jpeg"


class ImageFetcher:
    """Fetch one image by URL and relay its bytes."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        logger: RequestLogger,
        settings: ImageSettings | None = None,
    ) -> None:
        self._client = client
        self._base_url = base_url
        self._logger = logger
        self._settings = settings or ImageSettings()

    async def fetch(self, image_url: str | None) -> ForwardResponse:
        """Fetch image_url (absolute or backend-relative)."""
        try:
            fetch_url = self._resolve(image_url)
        except BadRequestInput as e:
            return _error_response(400, str(e))

        self._logger.log_image(fetch_url)
        try:
            response = await self._get(fetch_url)
        except UpstreamTransportError as e:
            self._logger.log_error("GET /fetch-image", 500, str(e))
            return _error_response(500, f"Failed to fetch image: {e}")

        if not response.is_success:
            self._logger.log_error("GET /fetch-image", response.status_code, fetch_url)
            return _error_response(
                response.status_code,
                f"Failed to fetch image: HTTP {response.status_code}",
            )

        content_type = response.headers.get("content-type") or DEFAULT_IMAGE_TYPE
        return ForwardResponse(
            status_code=200,
            content_type=content_type,
            body=response.content,
            kind=ResponseKind.BINARY,
            headers={"Cache-Control": f"public, max-age={self._settings.cache_max_age}"},
        )

    def _resolve(self, image_url: str | None) -> str:
        if not image_url:
            raise BadRequestInput("Image URL is required")
        return resolve_image_url(image_url, self._base_url)

    async def _get(self, url: str) -> httpx.Response:
        try:
            return await self._client.get(
                url,
                headers={"User-Agent": self._settings.user_agent},
                timeout=self._settings.timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            raise UpstreamTransportError(str(e), method="GET", url=url) from e


def _error_response(status_code: int, message: str) -> ForwardResponse:
    return ForwardResponse(
        status_code=status_code,
        content_type="application/json",
        body={"error": message},
    )

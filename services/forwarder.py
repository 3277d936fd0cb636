"""Forward inbound API requests to the upstream backend."""

import json
from typing import Any

import httpx

from core.config import DiagnosticsSettings
from core.exceptions import UpstreamTransportError
from core.headers import HeaderBuilder, encode_header_values
from core.protocols import RequestLogger
from core.request_types import BodyKind, ForwardRequest, ForwardResponse
from core.transform import transport_failure, translate_response
from core.urls import UpstreamTarget


class ProxyForwarder:
    """Translate one inbound request into one upstream request and back."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        target: UpstreamTarget,
        logger: RequestLogger,
        header_builder: HeaderBuilder | None = None,
        diagnostics: DiagnosticsSettings | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = client
        self._target = target
        self._logger = logger
        self._headers = header_builder or HeaderBuilder()
        self._diagnostics = diagnostics or DiagnosticsSettings()
        self._timeout = timeout
        self._body_encoders = {
            BodyKind.JSON: self._text_body,
            BodyKind.RAW: self._text_body,
            BodyKind.MULTIPART: self._multipart_body,
            BodyKind.EMPTY: self._no_body,
        }

    @property
    def target(self) -> UpstreamTarget:
        return self._target

    async def forward(self, request: ForwardRequest) -> ForwardResponse:
        """Forward the request; transport failures become a 500 envelope."""
        url = self._target.url_for(request.path_segments, request.query)
        body_kind = request.body_kind
        headers = self._headers.build(request.headers, body_kind)
        body_kwargs = self._body_encoders[body_kind](request)

        if body_kind is not BodyKind.EMPTY:
            self._maybe_log_body(request)
        self._logger.log_forward(request.method, url)

        try:
            response = await self._send(request.method, url, headers, body_kwargs)
        except UpstreamTransportError as e:
            self._logger.log_error(f"{request.method} /{request.path}", 500, str(e))
            return transport_failure(e)

        if response.is_error:
            self._logger.log_error(
                f"{request.method} /{request.path}", response.status_code, response.text
            )
        return translate_response(response)

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body_kwargs: dict[str, Any],
    ) -> httpx.Response:
        """Issue a single upstream attempt."""
        try:
            return await self._client.request(
                method,
                url,
                headers=encode_header_values(headers),
                timeout=self._timeout,
                **body_kwargs,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            raise UpstreamTransportError(str(e), method=method, url=url) from e

    @staticmethod
    def _text_body(request: ForwardRequest) -> dict[str, Any]:
        return {"content": request.body}

    @staticmethod
    def _multipart_body(request: ForwardRequest) -> dict[str, Any]:
        return {"files": request.body.to_httpx_files()}

    @staticmethod
    def _no_body(request: ForwardRequest) -> dict[str, Any]:
        return {}

    def _maybe_log_body(self, request: ForwardRequest) -> None:
        """Log the outbound body for the configured method/path pair."""
        diagnostics = self._diagnostics
        if request.method.upper() != diagnostics.body_log_method.upper():
            return
        if diagnostics.body_log_path_fragment not in request.path:
            return
        if not isinstance(request.body, str):
            return
        try:
            body: Any = json.loads(request.body)
        except ValueError:
            body = request.body
        self._logger.log_body(request.method, request.path, body)

"""FastAPI route handlers."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from core.headers import select_forward_headers
from core.protocols import RequestLogger
from core.request_types import (
    BODYLESS_METHODS,
    ForwardRequest,
    ForwardResponse,
    MultipartBody,
    ResponseKind,
)
from ui.log_utils import write_incoming_log

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB


async def _read_multipart(request: Request) -> MultipartBody:
    """Parse a multipart body into fields and files."""
    form = await request.form()
    fields: list[tuple[str, str]] = []
    files: list[tuple[str, str | None, bytes, str | None]] = []
    try:
        for name, value in form.multi_items():
            if isinstance(value, UploadFile):
                content = await value.read()
                files.append((name, value.filename, content, value.content_type))
            else:
                fields.append((name, value))
    finally:
        await form.close()
    return MultipartBody(fields=fields, files=files)


async def _read_body(
    request: Request,
    content_type: str,
    logger: RequestLogger,
) -> str | MultipartBody | None:
    """Read the inbound body; unreadable bodies are dropped, not fatal."""
    if request.method in BODYLESS_METHODS:
        return None
    try:
        if "multipart/form-data" in content_type.lower():
            return await _read_multipart(request)
        raw_body = await request.body()
    except (HTTPException, MultiPartException) as e:
        logger.log_error(
            f"{request.method} {request.url.path}",
            400,
            f"Failed to parse request body: {e}",
        )
        return None
    return raw_body.decode("utf-8", errors="replace") or None


async def build_forward_request(
    request: Request,
    path: str,
    logger: RequestLogger,
) -> ForwardRequest | Response:
    """Reduce a FastAPI request to a ForwardRequest, or return an error Response."""
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > MAX_BODY_SIZE:
        return JSONResponse({"error": "Request body too large"}, status_code=413)

    headers = select_forward_headers(request.headers)
    body = await _read_body(request, headers.get("content-type", ""), logger)
    segments = tuple(segment for segment in path.split("/") if segment)
    await run_in_threadpool(
        write_incoming_log, request.method, request.url.path, headers, body
    )
    return ForwardRequest(
        method=request.method,
        path_segments=segments,
        query=request.url.query,
        headers=headers,
        body=body,
    )


def render_response(result: ForwardResponse) -> Response:
    """Render a ForwardResponse; everything but binary bodies goes out as JSON."""
    if result.kind is ResponseKind.BINARY:
        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type=result.content_type or "application/octet-stream",
            headers=result.headers,
        )
    return JSONResponse(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


async def handle_proxy(request: Request, path: str, logger: RequestLogger) -> Response:
    """Handle /api/{path} by forwarding it upstream."""
    result = await build_forward_request(request, path, logger)
    if isinstance(result, Response):
        return result

    forwarder = request.app.state.forwarder
    return render_response(await forwarder.forward(result))


async def handle_fetch_image(request: Request) -> Response:
    """Handle /api/fetch-image?url=..."""
    fetcher = request.app.state.image_fetcher
    return render_response(await fetcher.fetch(request.query_params.get("url")))


async def handle_health(request: Request) -> Response:
    """Report liveness and the normalized upstream base."""
    forwarder = request.app.state.forwarder
    return JSONResponse({"status": "ok", "upstream": forwarder.target.base_url})

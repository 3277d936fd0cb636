"""Shared logging utilities."""

import json
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from core.request_types import MultipartBody

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"
MAX_INCOMING_LOGS = 200


def describe_body(body: Any) -> Any:
    """Return a JSON-friendly view of a request body.

    Multipart uploads are reduced to their names and sizes.
    """
    if isinstance(body, MultipartBody):
        return {
            "fields": dict(body.fields),
            "files": [
                {"field": name, "filename": filename, "size": len(content), "type": content_type}
                for name, filename, content, content_type in body.files
            ],
        }
    return body


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    body: Any,
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single incoming request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": _redact_headers(headers),
        "body": describe_body(body),
    }
    folder = log_root / "incoming"
    log_path = _write_json(folder, payload)
    _cleanup_folder(folder, keep=MAX_INCOMING_LOGS)
    return log_path


def write_body_log(
    method: str,
    path: str,
    body: Any,
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write an outbound body picked for diagnostic logging."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "body": body,
    }
    return _write_json(log_root / "forward", payload)


def write_cli_log(
    level: str,
    message: str,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    CLI_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with CLI_LOG_FILE.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> None:
    """Remove logs left over from a previous run."""
    if log_root.exists():
        shutil.rmtree(log_root)


def _cleanup_folder(folder: Path, keep: int) -> int:
    """Delete all but the most recent `keep` log files in a folder."""
    if not folder.exists():
        return 0

    files = sorted(folder.glob("*.json"))
    if len(files) <= keep:
        return 0

    deleted = 0
    # Filenames start with a UTC timestamp, so sorted order is oldest first
    for old_file in files[: len(files) - keep]:
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if "key" in key.lower() or "authorization" in key.lower():
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()

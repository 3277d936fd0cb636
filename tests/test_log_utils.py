"""Tests for log helpers."""

import json
from pathlib import Path

import pytest

from core.request_types import MultipartBody
from ui.log_utils import clear_logs, describe_body, write_body_log, write_incoming_log


def test_describe_multipart_hides_file_content() -> None:
    body = MultipartBody(
        fields=[("name", "Aviator")],
        files=[("image", "frame.png", b"PNGDATA", "image/png")],
    )

    assert describe_body(body) == {
        "fields": {"name": "Aviator"},
        "files": [{"field": "image", "filename": "frame.png", "size": 7, "type": "image/png"}],
    }


def test_describe_text_unchanged() -> None:
    assert describe_body('{"a": 1}') == '{"a": 1}'


def test_incoming_log_redacts_authorization(tmp_path: Path) -> None:
    path = write_incoming_log(
        "PUT",
        "/api/parties/42",
        {"authorization": "short", "content-type": "application/json"},
        '{"name": "Acme"}',
        log_root=tmp_path,
    )

    payload = json.loads(path.read_text())
    assert path.parent == tmp_path / "incoming"
    assert payload["headers"] == {"authorization": "***", "content-type": "application/json"}
    assert payload["body"] == '{"name": "Acme"}'


def test_body_log(tmp_path: Path) -> None:
    path = write_body_log("PUT", "parties/42", {"name": "Acme"}, log_root=tmp_path)

    assert json.loads(path.read_text())["body"] == {"name": "Acme"}


def test_clear_logs(tmp_path: Path) -> None:
    log_root = tmp_path / "logs"
    write_body_log("PUT", "parties/1", {}, log_root=log_root)

    clear_logs(log_root)

    assert not log_root.exists()
    clear_logs(log_root)


def test_incoming_logs_are_bounded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("ui.log_utils.MAX_INCOMING_LOGS", 2)

    paths = [
        write_incoming_log("GET", f"/api/items/{i}", {}, None, log_root=tmp_path)
        for i in range(3)
    ]

    remaining = sorted((tmp_path / "incoming").glob("*.json"))
    assert len(remaining) == 2
    assert set(remaining) <= set(paths)

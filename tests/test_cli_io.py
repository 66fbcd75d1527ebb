from __future__ import annotations

import json
import os
import stat
from datetime import datetime
from pathlib import Path

import pytest

from apps.cli.io import backup_file, build_backup_path, read_document, write_document_atomic
from core.utils.errors import ConfigIOError, ConfigNotFoundError, InvalidDocumentError


def test_read_document_parses_object(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"mcpServers": {"x": {}}}', encoding="utf-8")

    assert read_document(path) == {"mcpServers": {"x": {}}}


def test_read_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFoundError, match="Config not found"):
        read_document(tmp_path / "missing.json")


def test_read_document_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{ invalid json }", encoding="utf-8")

    with pytest.raises(InvalidDocumentError, match="Invalid JSON"):
        read_document(path)


def test_read_document_rejects_non_object_top_level(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(InvalidDocumentError, match="top level must be an object"):
        read_document(path)


def test_read_document_invalid_utf8_is_invalid_document(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_bytes(b'{"mcpServers": {"\xff": {}}}')

    with pytest.raises(InvalidDocumentError, match="not valid UTF-8"):
        read_document(path)


def test_read_document_deeply_nested_json_is_invalid_document(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[" * 200_000 + "]" * 200_000, encoding="utf-8")

    with pytest.raises(InvalidDocumentError, match="Invalid JSON"):
        read_document(path)


def test_read_document_directory_is_io_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigIOError):
        read_document(tmp_path)


def test_backup_file_copies_with_timestamp(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"test": "value"}', encoding="utf-8")

    backup_path = backup_file(path, now=datetime(2024, 5, 6, 7, 8, 9))

    assert backup_path.name == "config.json.bak.20240506-070809"
    assert backup_path.read_text(encoding="utf-8") == '{"test": "value"}'


def test_backup_names_stay_unique_within_one_second(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")
    now = datetime(2024, 5, 6, 7, 8, 9)

    first = backup_file(path, now=now)
    second = backup_file(path, now=now)

    assert first != second
    assert second.name == "config.json.bak.20240506-070809-1"
    assert build_backup_path(path, now=now).name == "config.json.bak.20240506-070809-2"


def test_write_document_atomic_uses_indent_and_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    document = {"b": 1, "a": {"name": "ünï"}}

    write_document_atomic(path, document)

    raw = path.read_text(encoding="utf-8")
    assert raw == '{\n  "b": 1,\n  "a": {\n    "name": "ünï"\n  }\n}\n'
    assert json.loads(raw) == document
    assert list(tmp_path.glob(".config.json.*.tmp")) == []


def test_write_document_atomic_overwrites_existing(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"old": true}', encoding="utf-8")

    write_document_atomic(path, {"new": True}, indent=4)

    assert path.read_text(encoding="utf-8") == '{\n    "new": true\n}\n'


def test_write_document_atomic_cleans_tmp_on_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")

    def broken_replace(self: Path, target: Path) -> Path:
        raise OSError("replace failed")

    monkeypatch.setattr(Path, "replace", broken_replace)

    with pytest.raises(ConfigIOError, match="replace failed"):
        write_document_atomic(path, {"mcpServers": {}})

    assert path.read_text(encoding="utf-8") == "{}"
    assert list(tmp_path.glob(".config.json.*.tmp")) == []


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_write_document_atomic_keeps_existing_mode(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{}", encoding="utf-8")
    path.chmod(0o644)

    write_document_atomic(path, {"mcpServers": {}})

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
    assert json.loads(path.read_text(encoding="utf-8")) == {"mcpServers": {}}

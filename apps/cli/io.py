"""CLI I/O helpers for reading, backing up, and atomically rewriting the config."""

from __future__ import annotations

import json
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from core.utils.errors import ConfigIOError, ConfigNotFoundError, InvalidDocumentError


def read_document(path: Path) -> dict[str, Any]:
    """Read and parse the config file; the top level must be a JSON object."""

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigNotFoundError(f"Config not found: {path}", path=str(path)) from exc
    except UnicodeDecodeError as exc:
        raise InvalidDocumentError(
            f"Config is not valid UTF-8: {path}: {exc}", path=str(path)
        ) from exc
    except OSError as exc:
        raise ConfigIOError(f"Unable to read file {path}: {exc}", path=str(path)) from exc

    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise InvalidDocumentError(f"Invalid JSON in {path}: {exc}", path=str(path)) from exc

    if not isinstance(document, dict):
        raise InvalidDocumentError(
            f"Invalid JSON in {path}: top level must be an object", path=str(path)
        )
    return document


def build_backup_path(path: Path, now: datetime | None = None) -> Path:
    """Build a `<name>.bak.<YYYYmmdd-HHMMSS>` path that does not exist yet."""

    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    candidate = path.with_name(f"{path.name}.bak.{stamp}")
    suffix = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.name}.bak.{stamp}-{suffix}")
        suffix += 1
    return candidate


def backup_file(path: Path, now: datetime | None = None) -> Path:
    """Copy the config next to itself before it is rewritten."""

    backup_path = build_backup_path(path, now)
    try:
        shutil.copyfile(path, backup_path)
    except OSError as exc:
        raise ConfigIOError(f"Unable to back up {path}: {exc}", path=str(path)) from exc
    return backup_path


def write_document_atomic(path: Path, document: dict[str, Any], *, indent: int = 2) -> None:
    """Write JSON (indented, trailing newline) via temporary file + replace."""

    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(document, ensure_ascii=False, indent=indent) + "\n"

    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(payload)
        if path.exists():
            shutil.copymode(path, tmp_path)
        tmp_path.replace(path)
    except OSError as exc:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
        raise ConfigIOError(f"Unable to write file {path}: {exc}", path=str(path)) from exc

"""Config file discovery across platforms."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from core.utils.errors import ConfigNotFoundError

CONFIG_DIR_ENV = "CLAUDE_CONFIG_DIR"


def detect_platform(platform: str | None = None) -> str:
    """Map `sys.platform` to one of mac, linux, win, other."""

    value = platform or sys.platform
    if value == "darwin":
        return "mac"
    if value.startswith("linux"):
        return "linux"
    if value in {"win32", "cygwin"}:
        return "win"
    return "other"


def expand_home(raw: str, home: Path | None = None) -> Path:
    """Expand a leading `~` against `home` (defaults to the user home)."""

    if raw.startswith("~"):
        base = home or Path.home()
        return base / raw[1:].lstrip("/\\")
    return Path(raw)


def candidate_config_paths(
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    home: Path | None = None,
) -> list[Path]:
    """Return config locations in lookup order."""

    env = os.environ if env is None else env
    home = home or Path.home()

    config_dir = env.get(CONFIG_DIR_ENV)
    if config_dir:
        base = expand_home(config_dir, home)
        return [base / "settings.json", base / "claude_desktop_config.json"]

    user_settings = home / ".claude" / "settings.json"
    detected = detect_platform(platform)
    if detected == "mac":
        desktop = home / "Library" / "Application Support" / "Claude"
        return [desktop / "claude_desktop_config.json", user_settings]
    if detected == "linux":
        return [home / ".config" / "claude" / "claude_desktop_config.json", user_settings]
    if detected == "win":
        app_data = env.get("APPDATA")
        roaming = Path(app_data) if app_data else home / "AppData" / "Roaming"
        return [roaming / "Claude" / "claude_desktop_config.json", user_settings]
    return []


def resolve_config_path(
    override: str | Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    home: Path | None = None,
) -> Path:
    """Pick the config file: explicit override first, else first readable candidate."""

    if override:
        path = expand_home(str(override), home)
        if not path.is_absolute():
            path = Path.cwd() / path
        path = path.resolve()
        if not _is_readable(path):
            raise ConfigNotFoundError(f"Config file not found: {path}", path=str(path))
        return path

    candidates = candidate_config_paths(env=env, platform=platform, home=home)
    for candidate in candidates:
        if _is_readable(candidate):
            return candidate

    tried = "\n".join(f"  - {candidate}" for candidate in candidates)
    raise ConfigNotFoundError(
        "Could not find Claude Code config. Tried:\n"
        f"{tried}\n"
        f"Set {CONFIG_DIR_ENV} or pass --config PATH"
    )


def _is_readable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)

"""Tool settings loading from YAML."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

SETTINGS_ENV = "MCP_SWITCH_SETTINGS"


class ToolSettings(BaseModel):
    """Settings for persistence and presentation."""

    model_config = ConfigDict(extra="forbid")

    backup: bool = True
    json_indent: int = Field(default=2, ge=0, le=8)
    display_width: int = Field(default=80, ge=8)
    suggestion_limit: int = Field(default=5, ge=1)


def load_settings(path: Path | None = None) -> ToolSettings:
    """Load and validate tool settings from YAML."""

    settings_path = path or Path(__file__).with_name("settings.yaml")

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Settings file not found: {settings_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in settings file: {settings_path}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Settings file must contain a mapping: {settings_path}")

    try:
        return ToolSettings.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings schema: {settings_path}") from exc

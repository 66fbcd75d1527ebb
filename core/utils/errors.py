"""Custom exceptions for core logic."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.registry.models import Item


class UnsupportedSchemaError(Exception):
    """Raised when the active server container is neither an object nor an array."""

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field


class UnsupportedTransitionError(Exception):
    """Raised when a matched entry cannot be moved into the requested state."""

    def __init__(self, message: str, *, item: Item | None = None) -> None:
        super().__init__(message)
        self.item = item


class InvalidDocumentError(Exception):
    """Raised when the config file is not valid JSON or not a JSON object."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigIOError(Exception):
    """Raised when the config file cannot be read or written."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigNotFoundError(ConfigIOError):
    """Raised when no config file exists at the requested or default locations."""

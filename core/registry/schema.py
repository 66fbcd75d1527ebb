"""Shape detection for the server collection of a registry document."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from core.registry.models import ACTIVE_FIELD, RegistrySchema
from core.utils.errors import UnsupportedSchemaError


def detect_schema(document: Mapping[str, Any]) -> RegistrySchema:
    """Classify the active container as object- or array-shaped.

    Rules:
    - Missing (or null) container defaults to object shape without marker.
    - Marker detection is a presence check on `enabled`, not a truthiness check.
    - Any other JSON type is rejected before anything is mutated.
    """

    servers = document.get(ACTIVE_FIELD) if isinstance(document, Mapping) else None
    if servers is None:
        return RegistrySchema(shape="object", has_enabled_marker=False)

    if isinstance(servers, list):
        return RegistrySchema(shape="array", has_enabled_marker=_any_declares_enabled(servers))

    if isinstance(servers, dict):
        return RegistrySchema(
            shape="object",
            has_enabled_marker=_any_declares_enabled(servers.values()),
        )

    raise UnsupportedSchemaError(
        f"Unsupported {ACTIVE_FIELD} schema: must be object or array "
        f"(got {type(servers).__name__})",
        field=ACTIVE_FIELD,
    )


def _any_declares_enabled(entries: Iterable[Any]) -> bool:
    return any(isinstance(entry, dict) and "enabled" in entry for entry in entries)

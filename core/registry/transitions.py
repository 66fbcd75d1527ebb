"""Enable/disable transitions applied in place to a registry document.

Two strategies exist:
- marker: the entry declares `enabled`, so only that boolean is flipped
- relocation: the entry is moved between `mcpServers` and `mcpServersDisabled`

Every check that can fail runs before the first write, so a raised error leaves the
document untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from core.registry.items import entry_for
from core.registry.models import ACTIVE_FIELD, DISABLED_FIELD, Item, RegistrySchema, Shape
from core.utils.errors import UnsupportedTransitionError

logger = logging.getLogger("mcpswitch.registry")

_ARRAY_DISABLE_MESSAGE = (
    f'Disable on array-shaped {ACTIVE_FIELD} without an "enabled" field is unsupported.\n'
    'Please add "enabled": true/false to your server entry or convert '
    f"{ACTIVE_FIELD} to an object keyed by server name."
)


def ensure_container(document: dict[str, Any], field: str, shape: Shape) -> dict | list:
    """Return `document[field]`, creating or replacing it when it has the wrong type."""

    current = document.get(field)
    if shape == "object":
        if not isinstance(current, dict):
            current = {}
            document[field] = current
        return current
    if not isinstance(current, list):
        current = []
        document[field] = current
    return current


def ensure_containers(document: dict[str, Any], shape: Shape) -> None:
    """Make sure both the active and the disabled container match `shape`."""

    ensure_container(document, ACTIVE_FIELD, shape)
    ensure_container(document, DISABLED_FIELD, shape)


def perform_enable(document: dict[str, Any], item: Item, schema: RegistrySchema) -> list[str]:
    """Bring an entry back to the active container and clear an `enabled=false` marker."""

    changes: list[str] = []
    entry = entry_for(document, item)

    if item.container == "disabled":
        if schema.shape == "object":
            _require_free_key(document, ACTIVE_FIELD, item)
            active = ensure_container(document, ACTIVE_FIELD, "object")
            disabled = ensure_container(document, DISABLED_FIELD, "object")
            active[item.key] = entry
            del disabled[item.key]
            changes.append(f"moved {item.key} from {DISABLED_FIELD} to {ACTIVE_FIELD}")
        else:
            active = ensure_container(document, ACTIVE_FIELD, "array")
            disabled = ensure_container(document, DISABLED_FIELD, "array")
            active.append(disabled.pop(item.index))
            changes.append(f"moved entry from {DISABLED_FIELD}[] to {ACTIVE_FIELD}[]")
    elif schema.shape == "object":
        changes.append(f"kept {item.label} in {ACTIVE_FIELD}")
    else:
        changes.append(f"kept entry in {ACTIVE_FIELD}[]")

    if _declares_enabled(entry):
        if entry["enabled"] is not True:
            entry["enabled"] = True
            changes.append("set enabled=true")
        else:
            changes.append("already enabled=true")

    logger.debug(
        "enable %s shape=%s marker=%s changes=%s",
        item.label,
        schema.shape,
        schema.has_enabled_marker,
        changes,
    )
    return changes


def perform_disable(document: dict[str, Any], item: Item, schema: RegistrySchema) -> list[str]:
    """Disable an entry via its own `enabled` marker, else by relocation.

    Rules:
    - An entry that declares `enabled` is never relocated, whichever container holds it.
    - Array-shaped entries without their own marker cannot be disabled.
    """

    changes: list[str] = []
    entry = entry_for(document, item)

    if _declares_enabled(entry):
        if entry["enabled"] is not False:
            entry["enabled"] = False
            changes.append("set enabled=false")
        else:
            changes.append("already enabled=false")
        logger.debug("disable %s via marker changes=%s", item.label, changes)
        return changes

    if schema.shape == "array":
        raise UnsupportedTransitionError(_ARRAY_DISABLE_MESSAGE, item=item)

    if item.container == "active":
        _require_free_key(document, DISABLED_FIELD, item)
        active = ensure_container(document, ACTIVE_FIELD, "object")
        disabled = ensure_container(document, DISABLED_FIELD, "object")
        disabled[item.key] = entry
        del active[item.key]
        changes.append(f"moved {item.key} from {ACTIVE_FIELD} to {DISABLED_FIELD}")
    else:
        changes.append(f"already in {DISABLED_FIELD} under key {item.key}")

    logger.debug("disable %s via relocation changes=%s", item.label, changes)
    return changes


def _require_free_key(document: dict[str, Any], field: str, item: Item) -> None:
    target = document.get(field)
    if isinstance(target, dict) and item.key in target:
        raise UnsupportedTransitionError(
            f"Cannot move {item.key}: {field} already has an entry under that key.\n"
            "Rename one of the two entries and try again.",
            item=item,
        )


def _declares_enabled(entry: Any) -> bool:
    return isinstance(entry, dict) and "enabled" in entry

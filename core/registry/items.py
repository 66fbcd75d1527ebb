"""Normalize active and disabled server entries into a flat item list."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from typing import Any

from core.registry.models import (
    ACTIVE_FIELD,
    DISABLED_FIELD,
    Container,
    Item,
    RegistrySchema,
    Shape,
)
from core.registry.schema import detect_schema

DEFAULT_DISPLAY_WIDTH = 80


def enumerate_items(
    document: Mapping[str, Any],
    schema: RegistrySchema | None = None,
    *,
    display_width: int = DEFAULT_DISPLAY_WIDTH,
) -> list[Item]:
    """Build one item per entry: active container first, then disabled container.

    A disabled container whose shape differs from the active one is treated as empty.
    Items are snapshots; enumerate again after mutating the document.
    """

    schema = schema or detect_schema(document)
    items: list[Item] = []
    for container, field in (("active", ACTIVE_FIELD), ("disabled", DISABLED_FIELD)):
        for address, entry in _iter_container(document.get(field), schema.shape):
            items.append(
                pack_item(
                    entry,
                    container=container,
                    shape=schema.shape,
                    key=address if isinstance(address, str) else None,
                    index=address if isinstance(address, int) else None,
                    display_width=display_width,
                )
            )
    return items


def pack_item(
    entry: Any,
    *,
    container: Container,
    shape: Shape,
    key: str | None = None,
    index: int | None = None,
    display_width: int = DEFAULT_DISPLAY_WIDTH,
) -> Item:
    """Derive the uniform item view for one entry."""

    definition = entry if isinstance(entry, dict) else {}
    enabled = bool(definition["enabled"]) if "enabled" in definition else None
    if container == "disabled" or enabled is False:
        status = "disabled"
    else:
        status = "enabled"

    transport = definition.get("transport")
    return Item(
        shape=shape,
        container=container,
        key=key,
        index=index,
        id=_safe_str(definition.get("id")) or None,
        name=_safe_str(definition.get("name")) or None,
        enabled=enabled,
        status=status,
        command=brief_command(definition, width=display_width),
        transport=brief_transport(transport, width=display_width) if transport else None,
    )


def entry_for(document: Mapping[str, Any], item: Item) -> Any:
    """Return the live entry an item points at."""

    field = ACTIVE_FIELD if item.container == "active" else DISABLED_FIELD
    container = document[field]
    if item.shape == "object":
        return container[item.key]
    return container[item.index]


def brief_command(
    definition: Mapping[str, Any] | None, *, width: int = DEFAULT_DISPLAY_WIDTH
) -> str | None:
    """Join `command` and `args` into one display string."""

    if not definition or not definition.get("command"):
        return None
    args = definition.get("args")
    parts = [definition["command"], *(args if isinstance(args, list) else [])]
    return truncate(" ".join(_safe_str(part) for part in parts), width)


def brief_transport(transport: Any, *, width: int = DEFAULT_DISPLAY_WIDTH) -> str | None:
    """Render a transport value (string or structured) for display."""

    if isinstance(transport, str):
        return truncate(transport, width)
    if isinstance(transport, (dict, list)):
        try:
            rendered = json.dumps(transport, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError):
            return None
        return truncate(rendered, width)
    return None


def truncate(value: str | None, width: int) -> str | None:
    """Cut `value` to `width` characters, marking the cut with an ellipsis."""

    if not value:
        return value
    if len(value) > width:
        return value[: width - 1] + "…"
    return value


def _iter_container(container: Any, shape: Shape) -> Iterator[tuple[str | int, Any]]:
    if shape == "object":
        if isinstance(container, dict):
            yield from container.items()
        return
    if isinstance(container, list):
        yield from enumerate(container)


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

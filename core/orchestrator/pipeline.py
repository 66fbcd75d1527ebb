"""Orchestration for one list or resolve+transition cycle over a registry document."""

from __future__ import annotations

import copy
import logging
from typing import Any

from core.registry.items import DEFAULT_DISPLAY_WIDTH, enumerate_items
from core.registry.matcher import DEFAULT_SUGGESTION_LIMIT, resolve_identifier
from core.registry.models import Action, Item, ToggleOutcome, TransitionReport
from core.registry.schema import detect_schema
from core.registry.transitions import perform_disable, perform_enable

logger = logging.getLogger("mcpswitch.registry")


def list_items(
    document: dict[str, Any],
    *,
    display_width: int = DEFAULT_DISPLAY_WIDTH,
) -> list[Item]:
    """Return the normalized item list for presentation."""

    schema = detect_schema(document)
    return enumerate_items(document, schema, display_width=display_width)


def run_toggle(
    document: dict[str, Any],
    identifier: str,
    action: Action,
    *,
    dry_run: bool = False,
    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    display_width: int = DEFAULT_DISPLAY_WIDTH,
) -> ToggleOutcome:
    """Execute detect -> enumerate -> resolve -> transition.

    The document is mutated in place unless `dry_run` is set, in which case the
    transition runs against a deep copy and only the planned changes are reported.
    Schema and transition errors propagate before any write to `document`.
    """

    if action not in {"enable", "disable"}:
        raise ValueError(f"Unsupported action: {action}")

    schema = detect_schema(document)
    items = enumerate_items(document, schema, display_width=display_width)
    match = resolve_identifier(items, identifier, limit=suggestion_limit)
    if not match.ok or match.item is None:
        logger.debug("identifier %r unresolved kind=%s", identifier, match.kind)
        return ToggleOutcome(match=match)

    target = copy.deepcopy(document) if dry_run else document
    before = copy.deepcopy(document)
    transition = perform_enable if action == "enable" else perform_disable
    changes = transition(target, match.item, schema)

    report = TransitionReport(
        action=action,
        item=match.item,
        changes=changes,
        changed=target != before,
        dry_run=dry_run,
    )
    return ToggleOutcome(match=match, report=report)

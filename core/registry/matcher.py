"""Identifier resolution over normalized items with near-miss suggestions."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from core.registry.models import Item, MatchResult

DEFAULT_SUGGESTION_LIMIT = 5

FieldSelector = Callable[[Item], str | None]

_FIELD_TIERS: tuple[tuple[str, FieldSelector], ...] = (
    ("id", lambda item: item.id),
    ("key", lambda item: item.key),
    ("name", lambda item: item.name),
)


def levenshtein(left: str, right: str) -> int:
    """Classic dynamic-programming edit distance (unit cost insert/delete/substitute)."""

    if not left:
        return len(right)
    if not right:
        return len(left)

    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i] + [0] * len(right)
        for j, right_char in enumerate(right, start=1):
            cost = 0 if left_char == right_char else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous = current
    return previous[-1]


def nearest_suggestions(items: Sequence[Item], identifier: str) -> list[Item]:
    """Rank items by the closest of their id/key/name values to `identifier`.

    Candidates are generated per item in id, key, name order; the sort is stable, so
    ties keep generation order. Each item appears once, at its best position.
    """

    needle = identifier.lower()
    scored: list[tuple[int, Item]] = []
    for item in items:
        for _, selector in _FIELD_TIERS:
            value = selector(item)
            if value:
                scored.append((levenshtein(needle, value.lower()), item))
    scored.sort(key=lambda pair: pair[0])

    ranked: list[Item] = []
    seen: set[int] = set()
    for _, item in scored:
        marker = id(item)
        if marker in seen:
            continue
        seen.add(marker)
        ranked.append(item)
    return ranked


def resolve_identifier(
    items: Sequence[Item],
    identifier: str,
    *,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> MatchResult:
    """Resolve a user-typed identifier to exactly one item.

    Rules:
    - Case-insensitive exact match, tried on id, then key, then name.
    - The first tier with any match decides: one match resolves, several are ambiguous.
    - No match on any tier yields suggestions ranked by edit distance.
    """

    needle = identifier.lower()
    for _, selector in _FIELD_TIERS:
        matches = [item for item in items if _equals(selector(item), needle)]
        if len(matches) == 1:
            return MatchResult.resolved(matches[0])
        if matches:
            return MatchResult.ambiguous_of(matches[:limit])

    return MatchResult.not_found(nearest_suggestions(items, identifier)[:limit])


def _equals(value: str | None, needle: str) -> bool:
    if not value:
        return False
    return value.lower() == needle

from __future__ import annotations

import pytest

from core.registry.items import enumerate_items, pack_item
from core.registry.matcher import levenshtein, nearest_suggestions, resolve_identifier
from core.registry.models import Item


def _keyed(key: str | None = None, **fields: object) -> Item:
    return pack_item(dict(fields), container="active", shape="object", key=key)


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("", "", 0),
        ("abc", "abc", 0),
        ("", "github", 6),
        ("slack", "", 5),
        ("kitten", "sitting", 3),
        ("Hello", "hello", 1),
        ("githb", "github", 1),
        ("githb", "gitlab", 2),
    ],
)
def test_levenshtein(left: str, right: str, expected: int) -> None:
    assert levenshtein(left, right) == expected
    assert levenshtein(right, left) == expected


def test_resolve_by_id_case_insensitive() -> None:
    items = [_keyed("a", id="GitHub"), _keyed("b", id="slack")]

    result = resolve_identifier(items, "github")

    assert result.ok
    assert result.kind == "resolved"
    assert result.item is items[0]
    assert result.suggestions == []


def test_resolve_by_key_then_name() -> None:
    items = [_keyed("github-key", id="gh"), _keyed("slack-key", name="Slack Integration")]

    assert resolve_identifier(items, "SLACK-KEY").item is items[1]
    assert resolve_identifier(items, "slack integration").item is items[1]


def test_resolve_prefers_id_over_other_items_key() -> None:
    by_id = _keyed("one", id="shared")
    by_key = _keyed("shared", id="two")

    result = resolve_identifier([by_key, by_id], "shared")

    assert result.ok
    assert result.item is by_id


def test_resolve_prefers_key_over_name() -> None:
    by_key = _keyed("shared")
    by_name = _keyed("other", name="Shared")

    result = resolve_identifier([by_name, by_key], "shared")

    assert result.item is by_key


def test_resolve_reports_ambiguous_ids_in_enumeration_order() -> None:
    document = {"mcpServers": {"a": {"id": "dup"}, "b": {"id": "other"}, "c": {"id": "DUP"}}}
    items = enumerate_items(document)

    result = resolve_identifier(items, "dup")

    assert result.kind == "ambiguous"
    assert result.ambiguous
    assert not result.ok
    assert [item.key for item in result.suggestions] == ["a", "c"]


def test_resolve_ambiguous_candidates_capped() -> None:
    items = [_keyed(f"k{index}", id="same") for index in range(8)]

    result = resolve_identifier(items, "same")

    assert result.ambiguous
    assert [item.key for item in result.suggestions] == ["k0", "k1", "k2", "k3", "k4"]


def test_resolve_does_not_fall_through_after_ambiguous_id() -> None:
    items = [_keyed("x", id="dup"), _keyed("y", id="dup"), _keyed("dup")]

    result = resolve_identifier(items, "dup")

    assert result.ambiguous
    assert [item.key for item in result.suggestions] == ["x", "y"]


def test_not_found_returns_ranked_suggestions() -> None:
    items = [_keyed(id="slack"), _keyed(id="gitlab"), _keyed(id="github")]

    result = resolve_identifier(items, "githb")

    assert result.kind == "not_found"
    assert not result.ambiguous
    assert result.suggestions[0].id == "github"
    assert [item.id for item in result.suggestions] == ["github", "gitlab", "slack"]


def test_not_found_suggestions_are_deduplicated_and_capped() -> None:
    items = [
        _keyed(f"server{index}", id=f"server{index}", name=f"Server {index}")
        for index in range(7)
    ]

    result = resolve_identifier(items, "server")

    assert len(result.suggestions) == 5
    assert len({item.key for item in result.suggestions}) == 5


def test_not_found_on_empty_list() -> None:
    result = resolve_identifier([], "anything")

    assert result.kind == "not_found"
    assert result.suggestions == []


def test_items_without_identifiers_never_match_or_suggest() -> None:
    anonymous = pack_item({"command": "npx"}, container="active", shape="array", index=0)
    named = pack_item({"id": "github"}, container="active", shape="array", index=1)

    result = resolve_identifier([anonymous, named], "zzz")

    assert result.kind == "not_found"
    assert result.suggestions == [named]


def test_nearest_suggestions_uses_best_field_per_item() -> None:
    far_id_near_name = _keyed(id="zzzzzz", name="github")
    near_id = _keyed(id="githubx")

    ranked = nearest_suggestions([near_id, far_id_near_name], "github")

    assert ranked == [far_id_near_name, near_id]


def test_nearest_suggestions_tie_keeps_generation_order() -> None:
    first = _keyed(id="aaa")
    second = _keyed(id="bbb")

    assert nearest_suggestions([first, second], "ccc") == [first, second]

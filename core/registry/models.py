"""Data models for server registry schema, items, matches, and transitions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Shape = Literal["object", "array"]
Container = Literal["active", "disabled"]
Status = Literal["enabled", "disabled"]
Action = Literal["enable", "disable"]
MatchKind = Literal["resolved", "ambiguous", "not_found"]

ACTIVE_FIELD = "mcpServers"
DISABLED_FIELD = "mcpServersDisabled"

_PUBLIC_ITEM_FIELDS = ("status", "key", "id", "name", "command", "transport", "container")


class RegistrySchema(BaseModel):
    """Detected shape of the server collection.

    Rules:
    - shape is decided once from the active container
    - has_enabled_marker is document-wide: True when any active entry declares `enabled`
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    shape: Shape
    has_enabled_marker: bool = False


class Item(BaseModel):
    """Normalized view of one server entry plus its address in the document.

    An item never carries the entry itself; `container` + `key`/`index` address the
    entry inside the document so writes land in the document the caller owns.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    shape: Shape
    container: Container
    key: str | None = None
    index: int | None = None
    id: str | None = None
    name: str | None = None
    enabled: bool | None = None
    status: Status
    command: str | None = None
    transport: str | None = None

    @property
    def label(self) -> str:
        """Best human-facing identifier for messages."""

        if self.key:
            return self.key
        if self.id:
            return self.id
        if self.name:
            return self.name
        return f"{self.container}[{self.index}]"

    def public_dict(self) -> dict[str, Any]:
        """Serialize the fields exposed by `list --json` and suggestion payloads."""

        return self.model_dump(mode="json", include=set(_PUBLIC_ITEM_FIELDS))


class MatchResult(BaseModel):
    """Identifier resolution outcome.

    - resolved: `item` is set, `suggestions` is empty
    - ambiguous: 2+ items tied on one field tier, listed in `suggestions`
    - not_found: `suggestions` holds near misses ranked by edit distance
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: MatchKind
    item: Item | None = None
    suggestions: list[Item] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.kind == "resolved"

    @property
    def ambiguous(self) -> bool:
        return self.kind == "ambiguous"

    @classmethod
    def resolved(cls, item: Item) -> MatchResult:
        return cls(kind="resolved", item=item)

    @classmethod
    def ambiguous_of(cls, candidates: list[Item]) -> MatchResult:
        return cls(kind="ambiguous", suggestions=candidates)

    @classmethod
    def not_found(cls, suggestions: list[Item]) -> MatchResult:
        return cls(kind="not_found", suggestions=suggestions)


class TransitionReport(BaseModel):
    """Result of one enable/disable cycle."""

    model_config = ConfigDict(extra="forbid")

    action: Action
    item: Item
    changes: list[str] = Field(default_factory=list)
    changed: bool
    dry_run: bool = False


class ToggleOutcome(BaseModel):
    """Match result plus the transition report when the identifier resolved."""

    model_config = ConfigDict(extra="forbid")

    match: MatchResult
    report: TransitionReport | None = None

    @property
    def ok(self) -> bool:
        return self.report is not None

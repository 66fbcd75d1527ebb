"""Human-readable rendering (banner, tables, change lists) for CLI output."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import typer

from core.registry.models import Item

_LOGO = (
    "   ____    ____  __  __  ____  ____  ",
    "  / ___|  / ___||  \\/  |/ ___||  _ \\ ",
    " | |     | |    | |\\/| | |    | |_) |",
    " | |___  | |___ | |  | | |___ |  __/ ",
    "  \\____|  \\____||_|  |_|\\____||_|    ",
)
_TITLE = "Claude Code MCP switcher"


@dataclass(frozen=True)
class Palette:
    """Color switch passed explicitly to every renderer."""

    enabled: bool = True

    def paint(
        self, text: str, *, fg: str | None = None, bold: bool = False, dim: bool = False
    ) -> str:
        if not self.enabled:
            return text
        return typer.style(text, fg=fg, bold=bold or None, dim=dim or None)

    def bold(self, text: str) -> str:
        return self.paint(text, bold=True)

    def dim(self, text: str) -> str:
        return self.paint(text, dim=True)

    def red(self, text: str) -> str:
        return self.paint(text, fg="red")

    def green(self, text: str) -> str:
        return self.paint(text, fg="green")

    def yellow(self, text: str) -> str:
        return self.paint(text, fg="yellow")

    def magenta(self, text: str) -> str:
        return self.paint(text, fg="magenta")

    def cyan(self, text: str) -> str:
        return self.paint(text, fg="cyan")

    def gray(self, text: str) -> str:
        return self.paint(text, fg="bright_black")


def render_banner(palette: Palette) -> str:
    lines = [palette.paint(line, fg="cyan", bold=True) for line in _LOGO]
    lines.append(palette.dim(f" ccmcp · {_TITLE}"))
    lines.append(palette.dim("─" * 54))
    return "\n".join(lines)


def render_item_table(items: Sequence[Item], palette: Palette) -> str:
    """Render the `list` table: STATUS, KEY, ID, NAME, COMMAND/TRANSPORT."""

    if not items:
        return palette.yellow("No MCP servers found.")
    rows = [
        [
            item.status,
            item.key or "",
            item.id or "",
            item.name or "",
            item.command or item.transport or "",
        ]
        for item in items
    ]
    return _render_table(["STATUS", "KEY", "ID", "NAME", "COMMAND/TRANSPORT"], rows, palette)


def render_suggestions_table(items: Sequence[Item], palette: Palette) -> str:
    """Render near-miss or ambiguous candidates: STATUS, KEY, ID, NAME, CONTAINER."""

    if not items:
        return palette.yellow("No suggestions.")
    rows = [
        [item.status, item.key or "", item.id or "", item.name or "", item.container]
        for item in items
    ]
    return _render_table(["STATUS", "KEY", "ID", "NAME", "CONTAINER"], rows, palette)


def render_changes(changes: Sequence[str], palette: Palette) -> str:
    if not changes:
        return palette.dim("  (no changes)")
    return "\n".join(f"  - {change}" for change in changes)


def _render_table(headers: list[str], rows: list[list[str]], palette: Palette) -> str:
    widths = [
        max([len(header), *(len(row[index]) for row in rows)])
        for index, header in enumerate(headers)
    ]
    column_styles: list[Callable[[str], str]] = [
        palette.yellow,
        palette.magenta,
        palette.cyan,
        palette.gray,
    ]

    def border(left: str, middle: str, right: str) -> str:
        return left + middle.join("─" * (width + 2) for width in widths) + right

    header_cells = [
        palette.paint(header.ljust(widths[index]), fg="cyan", bold=True)
        for index, header in enumerate(headers)
    ]
    lines = [
        border("┌", "┬", "┐"),
        "│ " + " │ ".join(header_cells) + " │",
        border("├", "┼", "┤"),
    ]

    for row in rows:
        cells: list[str] = []
        for index, value in enumerate(row):
            padded = value.ljust(widths[index])
            if index == 0:
                cells.append(palette.green(padded) if value == "enabled" else palette.red(padded))
            else:
                cells.append(column_styles[index - 1](padded))
        lines.append("│ " + " │ ".join(cells) + " │")

    lines.append(border("└", "┴", "┘"))
    return "\n".join(lines)

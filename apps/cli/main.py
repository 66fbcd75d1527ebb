"""Typer CLI entrypoint for ccmcp (MCP server switcher)."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Annotated, Any, NoReturn
from uuid import uuid4

import typer

from apps.cli.format_human import (
    Palette,
    render_banner,
    render_changes,
    render_item_table,
    render_suggestions_table,
)
from apps.cli.io import backup_file, read_document, write_document_atomic
from core.config.locator import resolve_config_path
from core.config.settings_loader import SETTINGS_ENV, ToolSettings, load_settings
from core.orchestrator.pipeline import list_items, run_toggle
from core.registry.models import Action, ToggleOutcome
from core.utils.errors import (
    ConfigIOError,
    InvalidDocumentError,
    UnsupportedSchemaError,
    UnsupportedTransitionError,
)

NAME = "mcp-switch"
VERSION = "0.1.0"

EX_OK = 0
EX_USAGE = 1
EX_NO_MATCH = 2
EX_AMBIGUOUS = 3
EX_IO = 4
EX_JSON = 5

logger = logging.getLogger("mcpswitch.cli")
logging.getLogger("mcpswitch").addHandler(logging.NullHandler())

app = typer.Typer(
    help="List, enable, and disable MCP servers in a Claude config file.",
    rich_markup_mode=None,
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Config file path (skips default lookup)."),
]
SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", help=f"Tool settings YAML (default: ${SETTINGS_ENV})."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Emit machine-readable JSON.")]
NoColorOption = Annotated[bool, typer.Option("--no-color", help="Disable ANSI colors.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", help="Log debug events to stderr.")]
DryRunOption = Annotated[
    bool, typer.Option("--dry-run", help="Show planned changes without writing.")
]
IdentifierArgument = Annotated[
    str | None, typer.Argument(help="Server key, id, or name (case-insensitive).")
]


class _CommandContext:
    """Per-invocation output settings and logging correlation."""

    def __init__(self, command: str, *, as_json: bool, no_color: bool) -> None:
        self.command = command
        self.as_json = as_json
        self.palette = Palette(enabled=not (no_color or as_json or "NO_COLOR" in os.environ))
        self.run_id = uuid4().hex[:12]
        self.started = time.perf_counter()
        self.stage = "init"

    def log(self, level: int, event: str, **fields: Any) -> None:
        _log_event(level, event, command=self.command, run_id=self.run_id, **fields)

    def fail(self, exit_code: int, exc: Exception) -> NoReturn:
        message = str(exc)
        self.log(
            logging.ERROR,
            "failed",
            error_type=type(exc).__name__,
            failure_stage=self.stage,
            exit_code=exit_code,
            elapsed_ms=_elapsed_ms(self.started),
        )
        if self.as_json:
            _echo_json(
                {
                    "ok": False,
                    "error": message,
                    "error_type": type(exc).__name__,
                    "stage": self.stage,
                }
            )
        else:
            typer.echo(self.palette.red(f"Error: {message}"), err=True)
        raise typer.Exit(code=exit_code)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{NAME} {VERSION}")
        raise typer.Exit()


@app.callback()
def cli_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Claude Code MCP switcher.

    Exit codes: 0 success, 1 usage, 2 no match, 3 ambiguous, 4 I/O error,
    5 invalid JSON or unsupported schema/transition.
    """


@app.command("list")
def list_command(
    config: ConfigOption = None,
    settings: SettingsOption = None,
    as_json: JsonOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List all MCP servers (active and disabled)."""

    _configure_logging(verbose)
    ctx = _CommandContext("list", as_json=as_json, no_color=no_color)
    ctx.log(logging.INFO, "start")

    try:
        ctx.stage = "load_settings"
        tool_settings = _load_tool_settings(settings)
        ctx.stage = "resolve_config"
        config_path = resolve_config_path(config)
        ctx.stage = "read_config"
        document = read_document(config_path)
        ctx.stage = "enumerate"
        items = list_items(document, display_width=tool_settings.display_width)
    except ValueError as exc:
        ctx.fail(EX_USAGE, exc)
    except ConfigIOError as exc:
        ctx.fail(EX_IO, exc)
    except (InvalidDocumentError, UnsupportedSchemaError) as exc:
        ctx.fail(EX_JSON, exc)

    if as_json:
        _echo_json([item.public_dict() for item in items])
    else:
        typer.echo(render_banner(ctx.palette))
        typer.echo(render_item_table(items, ctx.palette))

    ctx.log(
        logging.INFO,
        "done",
        config_path=str(config_path),
        item_count=len(items),
        elapsed_ms=_elapsed_ms(ctx.started),
    )
    raise typer.Exit(code=EX_OK)


@app.command("enable")
def enable_command(
    identifier: IdentifierArgument = None,
    config: ConfigOption = None,
    settings: SettingsOption = None,
    dry_run: DryRunOption = False,
    as_json: JsonOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Enable a server (move it back to mcpServers or set enabled=true)."""

    _toggle_command(
        "enable",
        identifier,
        config=config,
        settings=settings,
        dry_run=dry_run,
        as_json=as_json,
        no_color=no_color,
        verbose=verbose,
    )


@app.command("disable")
def disable_command(
    identifier: IdentifierArgument = None,
    config: ConfigOption = None,
    settings: SettingsOption = None,
    dry_run: DryRunOption = False,
    as_json: JsonOption = False,
    no_color: NoColorOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Disable a server (set enabled=false or move it to mcpServersDisabled)."""

    _toggle_command(
        "disable",
        identifier,
        config=config,
        settings=settings,
        dry_run=dry_run,
        as_json=as_json,
        no_color=no_color,
        verbose=verbose,
    )


def _toggle_command(
    action: Action,
    identifier: str | None,
    *,
    config: Path | None,
    settings: Path | None,
    dry_run: bool,
    as_json: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    _configure_logging(verbose)
    ctx = _CommandContext(action, as_json=as_json, no_color=no_color)

    if not identifier:
        ctx.stage = "args"
        ctx.fail(EX_USAGE, ValueError(f"{action} requires an identifier"))

    if not as_json:
        typer.echo(render_banner(ctx.palette))
    ctx.log(logging.INFO, "start", identifier=identifier, dry_run=dry_run)

    try:
        ctx.stage = "load_settings"
        tool_settings = _load_tool_settings(settings)
        ctx.stage = "resolve_config"
        config_path = resolve_config_path(config)
        ctx.stage = "read_config"
        document = read_document(config_path)
        ctx.stage = "toggle"
        outcome = run_toggle(
            document,
            identifier,
            action,
            dry_run=dry_run,
            suggestion_limit=tool_settings.suggestion_limit,
            display_width=tool_settings.display_width,
        )
    except ValueError as exc:
        ctx.fail(EX_USAGE, exc)
    except ConfigIOError as exc:
        ctx.fail(EX_IO, exc)
    except (InvalidDocumentError, UnsupportedSchemaError, UnsupportedTransitionError) as exc:
        ctx.fail(EX_JSON, exc)

    if outcome.report is None:
        _report_unresolved(ctx, identifier, outcome)

    report = outcome.report
    backup_path: Path | None = None
    if report.changed and not dry_run:
        try:
            if tool_settings.backup:
                ctx.stage = "backup"
                backup_path = backup_file(config_path)
            ctx.stage = "write_config"
            write_document_atomic(config_path, document, indent=tool_settings.json_indent)
        except ConfigIOError as exc:
            ctx.fail(EX_IO, exc)

    label = report.item.label
    if as_json:
        _echo_json(
            {
                "ok": True,
                "action": action,
                "identifier": identifier,
                "matched": report.item.public_dict(),
                "changes": report.changes,
                "changed": report.changed,
                "dryRun": dry_run,
                "configPath": str(config_path),
                "backupPath": str(backup_path) if backup_path is not None else None,
            }
        )
    elif dry_run:
        typer.echo(ctx.palette.yellow(f"[DRY RUN] Planned changes for {action} {label}:"))
        typer.echo(render_changes(report.changes, ctx.palette))
    else:
        verb = "Enabled" if action == "enable" else "Disabled"
        typer.echo(ctx.palette.green(f"✔ {verb} {label}"))
        typer.echo(render_changes(report.changes, ctx.palette))
        if backup_path is not None:
            typer.echo(ctx.palette.dim(f"Backup: {backup_path}"))
        if not report.changed:
            typer.echo(ctx.palette.dim("Nothing to write; config left unchanged."))

    ctx.log(
        logging.INFO,
        "done",
        identifier=identifier,
        matched=label,
        changes=report.changes,
        changed=report.changed,
        dry_run=dry_run,
        elapsed_ms=_elapsed_ms(ctx.started),
    )
    raise typer.Exit(code=EX_OK)


def _report_unresolved(ctx: _CommandContext, identifier: str, outcome: ToggleOutcome) -> NoReturn:
    match = outcome.match
    if match.ambiguous:
        message = f'Identifier "{identifier}" is ambiguous'
        exit_code = EX_AMBIGUOUS
        event = "ambiguous"
    else:
        message = f'No MCP server matches "{identifier}"'
        exit_code = EX_NO_MATCH
        event = "no_match"

    ctx.log(
        logging.WARNING,
        event,
        identifier=identifier,
        suggestion_count=len(match.suggestions),
        elapsed_ms=_elapsed_ms(ctx.started),
    )

    if ctx.as_json:
        _echo_json(
            {
                "ok": False,
                "ambiguous": match.ambiguous,
                "error": message,
                "suggestions": [item.public_dict() for item in match.suggestions],
            }
        )
    else:
        typer.echo(ctx.palette.red(f"Error: {message}."), err=True)
        heading = "Matching servers:" if match.ambiguous else "Suggestions:"
        typer.echo(ctx.palette.bold(heading))
        typer.echo(render_suggestions_table(match.suggestions, ctx.palette))
    raise typer.Exit(code=exit_code)


def _load_tool_settings(path: Path | None) -> ToolSettings:
    if path is None:
        env_path = os.environ.get(SETTINGS_ENV)
        path = Path(env_path) if env_path else None
    return load_settings(path)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")
        logging.getLogger("mcpswitch").setLevel(logging.DEBUG)


def _log_event(level: int, event: str, **fields: Any) -> None:
    payload = {"event": event, **fields}
    logger.log(level, _dump_json(payload))


def _dump_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()

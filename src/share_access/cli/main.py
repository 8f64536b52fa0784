"""CLI entry point for share-access.

Invoked as::

    share-access [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m share_access.cli.main

Commands
--------
- deny          Block an identity from paths
- rescind       Remove a block added by ``deny``
- grant         Allow an identity access to paths
- revoke        Remove an identity's allow rule from paths
- show          Show an identity's current access state on paths
- suggest       List suggested identity names
- audit show    Display recent audit entries
- version       Show version information

Passing ``-`` as the only path reads newline-separated paths from stdin.
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Sequence

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from share_access.errors import ConfigError, ShareAccessError

if TYPE_CHECKING:
    from share_access.config_loader import ShareAccessConfig
    from share_access.manager import AccessRuleManager, AccessUpdate

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("share-access.yaml")

_STATE_STYLES: dict[str, str] = {
    "NoRule": "dim",
    "Allowed": "green",
    "Denied": "red",
    "AllowedAndDenied": "yellow",
}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _config_option(func: Callable[..., None]) -> Callable[..., None]:
    return click.option(
        "--config",
        "-c",
        "config_path",
        default=str(_DEFAULT_CONFIG),
        type=click.Path(),
        help="Path to share-access.yaml (defaults apply if it is missing).",
    )(func)


def _identity_option(func: Callable[..., None]) -> Callable[..., None]:
    return click.option(
        "--identity",
        "-i",
        default=None,
        help="User or group name. Defaults to default_identity from the config.",
    )(func)


def _load_config(config_path: str) -> ShareAccessConfig:
    from share_access.config_loader import ConfigLoader

    loader = ConfigLoader()
    cfg_path = Path(config_path)
    try:
        return loader.load(cfg_path) if cfg_path.exists() else loader.defaults()
    except ConfigError as exc:
        err_console.print(f"[red]Invalid config:[/red] {exc}")
        sys.exit(1)


def _build_manager(config: ShareAccessConfig) -> AccessRuleManager:
    from share_access.audit.logger import AuditLogger
    from share_access.manager import AccessRuleManager
    from share_access.stores.yaml_store import YamlDescriptorStore

    audit = AuditLogger(log_path=config.audit.log_path) if config.audit.enabled else None
    return AccessRuleManager(
        store=YamlDescriptorStore(config.store.path),
        audit_logger=audit,
        notice=lambda message: err_console.print(f"[yellow]Note:[/yellow] {message}", soft_wrap=True),
    )


def _expand_paths(paths: Sequence[str]) -> list[str]:
    if list(paths) == ["-"]:
        return [line.strip() for line in sys.stdin if line.strip()]
    return list(paths)


def _render_updates(title: str, updates: list[AccessUpdate]) -> None:
    if not updates:
        console.print("[yellow]No paths given; nothing to do.[/yellow]")
        return

    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Path", style="cyan")
    table.add_column("Kind")
    table.add_column("State", style="bold")
    table.add_column("Rules")
    table.add_column("Changed")

    for update in updates:
        state = update.state.value
        style = _STATE_STYLES.get(state, "")
        rules = ", ".join(r.describe() for r in update.descriptor.rules_for(update.identity))
        table.add_row(
            update.path,
            "folder" if update.is_container else "file",
            f"[{style}]{state}[/{style}]" if style else state,
            rules or "-",
            "yes" if update.changed else "no",
        )
    console.print(table)


def _run(
    operation: Callable[[], list[AccessUpdate]],
    title: str,
) -> None:
    try:
        updates = operation()
    except ShareAccessError as exc:
        err_console.print(f"[red]Aborted:[/red] {exc}", soft_wrap=True)
        sys.exit(1)
    _render_updates(title, updates)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="share-access")
def cli() -> None:
    """share-access CLI: grant, revoke, block, and unblock access to shared folders."""


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from share_access import __version__

    console.print(
        Panel(
            f"[bold]share-access[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Access-rule management for shared files and folders.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# Mutating commands
# ---------------------------------------------------------------------------


@cli.command(name="deny")
@click.argument("paths", nargs=-1, type=click.Path())
@_identity_option
@_config_option
def deny_command(paths: tuple[str, ...], identity: str | None, config_path: str) -> None:
    """Block IDENTITY from PATHS with a Deny/FullControl rule."""
    config = _load_config(config_path)
    manager = _build_manager(config)
    identity = identity or config.default_identity
    _run(
        lambda: manager.deny_access(_expand_paths(paths), identity=identity),
        f"Blocked '{identity}'",
    )


@cli.command(name="rescind")
@click.argument("paths", nargs=-1, type=click.Path())
@_identity_option
@_config_option
def rescind_command(paths: tuple[str, ...], identity: str | None, config_path: str) -> None:
    """Remove the block that ``deny`` added for IDENTITY on PATHS."""
    config = _load_config(config_path)
    manager = _build_manager(config)
    identity = identity or config.default_identity
    _run(
        lambda: manager.rescind_deny(_expand_paths(paths), identity=identity),
        f"Unblocked '{identity}'",
    )


@cli.command(name="grant")
@click.argument("paths", nargs=-1, type=click.Path())
@_identity_option
@click.option(
    "--access",
    "-a",
    type=click.Choice(["FullControl", "Modify", "ReadAndExecute"]),
    default="ReadAndExecute",
    show_default=True,
    help="Rights level to allow.",
)
@click.option(
    "--inherit",
    "inherit_scope",
    type=click.Choice(["All", "ThisFolder"]),
    default="All",
    show_default=True,
    help="All: subfolders and files. ThisFolder: files directly in the folder only.",
)
@_config_option
def grant_command(
    paths: tuple[str, ...],
    identity: str | None,
    access: str,
    inherit_scope: str,
    config_path: str,
) -> None:
    """Allow IDENTITY access to PATHS."""
    config = _load_config(config_path)
    manager = _build_manager(config)
    identity = identity or config.default_identity
    _run(
        lambda: manager.grant_access(
            _expand_paths(paths),
            identity=identity,
            access=access,
            inherit_scope=inherit_scope,
        ),
        f"Granted '{identity}' {access}",
    )


@cli.command(name="revoke")
@click.argument("paths", nargs=-1, type=click.Path())
@_identity_option
@_config_option
def revoke_command(paths: tuple[str, ...], identity: str | None, config_path: str) -> None:
    """Remove the allow rule for IDENTITY from PATHS."""
    config = _load_config(config_path)
    manager = _build_manager(config)
    identity = identity or config.default_identity
    _run(
        lambda: manager.revoke_access(_expand_paths(paths), identity=identity),
        f"Revoked '{identity}'",
    )


# ---------------------------------------------------------------------------
# Read-only commands
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("paths", nargs=-1, type=click.Path())
@_identity_option
@_config_option
def show_command(paths: tuple[str, ...], identity: str | None, config_path: str) -> None:
    """Show IDENTITY's current access state on PATHS."""
    config = _load_config(config_path)
    manager = _build_manager(config)
    identity = identity or config.default_identity
    _run(
        lambda: manager.inspect(_expand_paths(paths), identity=identity),
        f"Access for '{identity}'",
    )


@cli.command(name="suggest")
@_config_option
def suggest_command(config_path: str) -> None:
    """List suggested identity names."""
    from share_access.identities import suggest_identities

    config = _load_config(config_path)
    for name in suggest_identities(
        groups=config.suggestions.groups,
        years_back=config.suggestions.years_back,
    ):
        console.print(name)


@cli.group(name="audit")
def audit_group() -> None:
    """Audit trail commands."""


@audit_group.command(name="show")
@click.option("--last", "-n", default=20, show_default=True, type=click.IntRange(min=1), help="Number of recent entries to show.")
@_config_option
def audit_show_command(last: int, config_path: str) -> None:
    """Show recent audit log entries."""
    from share_access.audit.logger import AuditLogger

    config = _load_config(config_path)
    audit = AuditLogger(log_path=config.audit.log_path)
    records = audit.last_n(last)

    if not records:
        console.print("[yellow]No audit entries found.[/yellow]")
        return

    table = Table(title=f"Last {last} Audit Events", box=box.SIMPLE)
    table.add_column("Timestamp", style="dim", no_wrap=True)
    table.add_column("Event", style="cyan")
    table.add_column("Identity", style="magenta")
    table.add_column("Path")
    table.add_column("State")

    for record in records:
        ts = str(record.get("timestamp", ""))[:19].replace("T", " ")
        table.add_row(
            ts,
            str(record.get("event", "")),
            str(record.get("identity", "")),
            str(record.get("path", "")),
            str(record.get("state", "")),
        )

    console.print(table)
    console.print(f"  Total audit records: [cyan]{audit.count()}[/cyan]")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()

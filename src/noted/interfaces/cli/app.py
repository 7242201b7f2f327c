"""CLI application for Noted using Rich and Typer."""

import logging
import os
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from noted.core.config import (
    ensure_config_dir,
    get_log_file,
    is_debug_enabled,
    setup_logging,
)
from noted.core.errors import InputValidationError, NotedError, VaultCancelledError
from noted.core.paths import expand_path
from noted.core.registry import VaultRegistry
from noted.core.types import Vault
from noted.core.vault import (
    build_vault_config,
    config_path_for,
    read_vault_config,
    write_vault_config,
)
from noted.storage.config_store import YamlConfigStore
from noted.tui.runner import launch_vault_tui

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="noted",
    help="A CLI tool for managing notes with vaults, templates, and fast search.",
    no_args_is_help=False,
)

vault_app = typer.Typer(
    help="Manage vaults - select, create, or open a specific vault.",
    invoke_without_command=True,
)
app.add_typer(vault_app, name="vault")

console = Console()


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


def _get_store() -> YamlConfigStore:
    """Ensure the config directory and file exist and return the store."""
    try:
        ensure_config_dir()
        store = YamlConfigStore()
        if store.ensure():
            console.print(f"[dim]Initialized new config at {store.path}[/dim]")
    except (NotedError, OSError) as e:
        _fail(e)
    return store


def _load_registry(store: YamlConfigStore) -> VaultRegistry:
    try:
        return VaultRegistry.load(store)
    except NotedError as e:
        _fail(e)


def _has_terminal() -> bool:
    return sys.stdin.isatty()


def _interactive_select(store: YamlConfigStore) -> None:
    """Launch the vault flow; it persists the registry itself."""
    if not _has_terminal():
        console.print(
            "[red]Interactive vault selection needs a terminal.[/red]\n"
            "[dim]Use 'noted vault create <path>' or 'noted vault --open <name>'.[/dim]"
        )
        raise typer.Exit(1)

    try:
        vault = launch_vault_tui(store, console=console)
    except VaultCancelledError:
        console.print("[yellow]Vault selection cancelled.[/yellow]")
        return
    except NotedError as e:
        _fail(e)
    console.print(f"[green]✓ Vault set to: {vault.name}[/green]")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
):
    """Noted keeps your note vaults in $XDG_CONFIG_HOME/noted or ~/.config/noted."""
    debug = is_debug_enabled(debug)
    setup_logging(debug=debug, log_file=get_log_file())
    if debug:
        console.print(f"[dim]Debug logging enabled ({get_log_file()})[/dim]")

    store = _get_store()
    ctx.obj = store
    if ctx.invoked_subcommand is not None:
        return

    registry = _load_registry(store)
    current = registry.current_vault()
    if current is None:
        console.print("No vault is currently set.")
        _interactive_select(store)
        return
    console.print(f"Current vault: {current.name}")


@vault_app.callback()
def vault_callback(
    ctx: typer.Context,
    open_vault: Optional[str] = typer.Option(
        None,
        "--open",
        "-o",
        help="Open vault by name or 1-based index",
    ),
):
    """Open the interactive vault menu, or a vault by name or index."""
    if ctx.invoked_subcommand is not None:
        return

    store = ctx.obj or _get_store()
    if open_vault:
        _open_vault(store, open_vault)
        return
    _interactive_select(store)


def _open_vault(store: YamlConfigStore, name_or_index: str) -> None:
    registry = _load_registry(store)
    if not registry.vaults:
        console.print("No vaults configured. Run 'noted vault' to create one.")
        raise typer.Exit(1)

    try:
        vault = registry.resolve(name_or_index)
        registry.select(vault)
        registry.save(store)
    except NotedError as e:
        _fail(e)
    console.print(f"[green]✓ Opened vault: {vault.name}[/green]")


@vault_app.command("list")
def list_vaults(ctx: typer.Context):
    """List all configured vaults."""
    store = ctx.obj or _get_store()
    registry = _load_registry(store)
    if not registry.vaults:
        console.print("No vaults configured. Run 'noted vault' to create one.")
        return

    table = Table(title="Configured vaults", show_header=True)
    table.add_column("#", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Path")
    table.add_column("Status")

    for i, vault in enumerate(registry.vaults, 1):
        status = (
            "[green]current[/green]"
            if vault.path == registry.current_vault_path
            else ""
        )
        table.add_row(str(i), vault.name, vault.path, status)

    console.print(table)


@vault_app.command("current")
def current_vault(ctx: typer.Context):
    """Show the current active vault."""
    store = ctx.obj or _get_store()
    registry = _load_registry(store)
    if not registry.current_vault_path:
        console.print("No current vault set. Run 'noted vault' to select one.")
        return

    vault = registry.current_vault()
    if vault is None:
        console.print(
            f"[yellow]Current vault path: {registry.current_vault_path} "
            "(not found in vaults list)[/yellow]"
        )
        return
    console.print(f"Current vault: {vault.name}")
    console.print(f"Path: {vault.path}")


@vault_app.command("create")
def create_vault(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory for the new vault"),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Vault name (defaults to the folder name)",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Create the directory without asking",
    ),
):
    """Create a new vault at PATH and set it as current."""
    store = ctx.obj or _get_store()
    try:
        expanded = os.path.abspath(expand_path(path))
    except NotedError as e:
        _fail(e)

    if not os.path.isdir(expanded):
        if not yes and not typer.confirm(
            f"Directory '{expanded}' does not exist. Create it?", default=False
        ):
            console.print("Vault creation cancelled.")
            return

    vault_name = (name or "").strip() or os.path.basename(expanded.rstrip(os.sep))
    if not vault_name:
        _fail(InputValidationError("Vault name cannot be empty."))

    registry = _load_registry(store)
    try:
        if config_path_for(expanded).exists():
            logger.info(f"Keeping existing vault config in {expanded}")
            config = read_vault_config(expanded)
        else:
            config = build_vault_config(vault_name, expanded)
            write_vault_config(expanded, config)
        vault = Vault(name=vault_name, path=expanded, config=config)
        registry.select(vault)
        registry.save(store)
    except NotedError as e:
        _fail(e)

    logger.info(f"Vault created: {vault_name} at {expanded}")
    console.print(f"[green]✓ Vault created and set as current: {vault_name}[/green]")


@vault_app.command("info")
def vault_info(
    ctx: typer.Context,
    vault_ref: Optional[str] = typer.Argument(
        None, help="Vault name or 1-based index (defaults to the current vault)"
    ),
):
    """Show the vault.json details of a vault."""
    store = ctx.obj or _get_store()
    registry = _load_registry(store)
    try:
        if vault_ref:
            vault = registry.resolve(vault_ref)
        else:
            vault = registry.current_vault()
            if vault is None:
                console.print("No current vault set. Run 'noted vault' to select one.")
                raise typer.Exit(1)
        config = read_vault_config(vault.path)
    except NotedError as e:
        _fail(e)

    table = Table(title="Vault Details", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Name", config.name)
    table.add_row("Path", vault.path)
    table.add_row("Templates", config.templates_path)
    table.add_row("Log", config.log_path)
    table.add_row("History", config.history_path)
    table.add_row("Supported Types", ", ".join(sorted(config.supported_types)))
    table.add_row("Ignore Patterns", ", ".join(sorted(config.ignore_patterns)))
    table.add_row("Created", config.created_at.strftime("%Y-%m-%d %H:%M:%S"))
    table.add_row("Modified", config.modified_at.strftime("%Y-%m-%d %H:%M:%S"))
    table.add_row("Metadata", str(config.metadata))
    table.add_row("Settings", str(config.settings))
    console.print(table)


def run_cli():
    """Entry point for the Noted CLI."""
    app()

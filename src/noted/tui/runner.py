"""Event loop driving the vault flow on a real terminal."""

import logging

from rich.console import Console
from rich.live import Live

from noted.core.errors import VaultCancelledError
from noted.core.types import Vault
from noted.storage.config_store import ConfigStore
from noted.tui import keys
from noted.tui.keys import KeyReader
from noted.tui.render import render_flow, render_outcome
from noted.tui.vault_flow import FlowOutcome, OutcomeKind, VaultFlow

logger = logging.getLogger(__name__)


def run_vault_flow(
    store: ConfigStore,
    console: Console | None = None,
    reader=None,
    flow: VaultFlow | None = None,
) -> FlowOutcome:
    """Run the interactive vault flow until it finishes.

    Args:
        store: Registry persistence handed to the flow
        console: Rich console to draw on (defaults to stdout)
        reader: Context manager with read_key(); defaults to KeyReader
        flow: Pre-built flow, mainly for tests

    Returns:
        The flow's outcome (selected, cancelled or error).
    """
    console = console or Console()
    flow = flow or VaultFlow(store)
    reader = reader or KeyReader()

    with reader as key_source, Live(
        render_flow(flow), console=console, auto_refresh=False, transient=True
    ) as live:
        while not flow.done:
            try:
                key = key_source.read_key()
            except (KeyboardInterrupt, EOFError):
                key = keys.CTRL_C
            flow.handle_key(key)
            live.update(render_flow(flow), refresh=True)

    console.print(render_outcome(flow))
    outcome = flow.take_outcome()
    logger.debug(f"Vault flow finished: {outcome.kind}")
    return outcome


def launch_vault_tui(store: ConfigStore, console: Console | None = None, reader=None) -> Vault:
    """Run the flow and return the chosen vault.

    Raises:
        VaultCancelledError: If the user cancelled.
        NotedError: The flow's error (sidecar write or registry save failure).
    """
    outcome = run_vault_flow(store, console=console, reader=reader)
    if outcome.kind is OutcomeKind.CANCELLED:
        raise VaultCancelledError("vault selection cancelled")
    if outcome.kind is OutcomeKind.ERROR:
        raise outcome.error
    return outcome.vault

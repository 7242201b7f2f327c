"""Tests for the terminal runner driving the vault flow."""

import io

import pytest
from rich.console import Console

from noted.core.errors import VaultCancelledError, VaultFilesystemError
from noted.tui import keys
from noted.tui.runner import launch_vault_tui, run_vault_flow
from noted.tui.vault_flow import OutcomeKind


class ScriptedReader:
    """Key source replaying a fixed list of keys, then raising EOFError."""

    def __init__(self, *script: str):
        self.script = list(script)
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True

    def read_key(self) -> str:
        if not self.script:
            raise EOFError
        key = self.script.pop(0)
        if isinstance(key, type) and issubclass(key, BaseException):
            raise key
        return key


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, force_terminal=False)


@pytest.fixture
def two_vaults(make_vault, make_store):
    return make_store([make_vault("Work"), make_vault("Personal")])


class TestRunVaultFlow:
    """Tests for run_vault_flow()."""

    def test_select_vault(self, home, two_vaults, console):
        reader = ScriptedReader(keys.DOWN, keys.ENTER)

        outcome = run_vault_flow(two_vaults, console=console, reader=reader)

        assert outcome.kind is OutcomeKind.SELECTED
        assert outcome.vault.name == "Personal"
        assert reader.entered and reader.exited
        assert "Vault set!" in console.file.getvalue()

    def test_cancel(self, home, two_vaults, console):
        outcome = run_vault_flow(two_vaults, console=console, reader=ScriptedReader("q"))

        assert outcome.kind is OutcomeKind.CANCELLED
        assert "Cancelled." in console.file.getvalue()

    def test_end_of_input_cancels(self, home, two_vaults, console):
        """Closed input behaves like ctrl+c instead of looping forever."""
        outcome = run_vault_flow(two_vaults, console=console, reader=ScriptedReader(keys.DOWN))

        assert outcome.kind is OutcomeKind.CANCELLED

    def test_keyboard_interrupt_cancels(self, home, two_vaults, console):
        reader = ScriptedReader(keys.DOWN, KeyboardInterrupt)

        outcome = run_vault_flow(two_vaults, console=console, reader=reader)

        assert outcome.kind is OutcomeKind.CANCELLED
        assert reader.exited

    def test_create_through_runner(self, home, make_store, console):
        store = make_store()
        reader = ScriptedReader(keys.ENTER, *"~/notes", keys.ENTER, keys.ENTER)

        outcome = run_vault_flow(store, console=console, reader=reader)

        assert outcome.created
        assert (home / "notes" / "vault.json").is_file()
        assert store.current == str(home / "notes")


class TestLaunchVaultTui:
    """Tests for launch_vault_tui()."""

    def test_returns_vault(self, home, two_vaults, console):
        vault = launch_vault_tui(two_vaults, console=console, reader=ScriptedReader(keys.ENTER))

        assert vault.name == "Work"

    def test_cancel_raises(self, home, two_vaults, console):
        with pytest.raises(VaultCancelledError):
            launch_vault_tui(two_vaults, console=console, reader=ScriptedReader(keys.ESC))

    def test_error_is_raised(self, home, make_store, console):
        """A failed sidecar write surfaces as the flow's error."""
        target = str(home / "file.txt" / "vault")
        reader = ScriptedReader(keys.ENTER, *target, keys.ENTER, keys.ENTER)

        with pytest.raises(VaultFilesystemError):
            launch_vault_tui(make_store(), console=console, reader=reader)

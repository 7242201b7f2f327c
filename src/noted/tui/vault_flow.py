"""Vault flow - the interactive select / create / delete state machine.

    LISTING --enter on vault--------------> DONE (selected)
    LISTING --enter on create-------------> PICKING_DIRECTORY
    LISTING --D on vault------------------> CONFIRMING_DELETION
    LISTING --q / esc---------------------> DONE (cancelled)
    PICKING_DIRECTORY --picker cancelled--> LISTING
    PICKING_DIRECTORY --picker resolved---> NAMING_VAULT
    NAMING_VAULT --esc--------------------> PICKING_DIRECTORY (fresh picker)
    NAMING_VAULT --enter------------------> DONE (selected or error)
    CONFIRMING_DELETION --y---------------> LISTING (vault removed)
    CONFIRMING_DELETION --n / esc---------> LISTING

The flow is fed one key at a time and never blocks on input itself; the
runner owns the terminal.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from noted.core.config import NAME_INPUT_LIMIT
from noted.core.errors import (
    InputValidationError,
    NotedError,
    RegistryError,
    VaultFilesystemError,
)
from noted.core.registry import VaultRegistry
from noted.core.types import ListItem, Vault, build_list_items
from noted.core.vault import build_vault_config, remove_vault_config, write_vault_config
from noted.storage.config_store import ConfigStore
from noted.tui import keys
from noted.tui.directory_picker import DirectoryPicker

logger = logging.getLogger(__name__)


class FlowState(StrEnum):
    LISTING = "listing"
    PICKING_DIRECTORY = "picking_directory"
    NAMING_VAULT = "naming_vault"
    CONFIRMING_DELETION = "confirming_deletion"
    DONE = "done"


class OutcomeKind(StrEnum):
    SELECTED = "selected"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass(frozen=True)
class FlowOutcome:
    """Final result of a vault flow."""

    kind: OutcomeKind
    vault: Vault | None = None
    error: NotedError | None = None
    created: bool = False

    @classmethod
    def selected(cls, vault: Vault, created: bool = False) -> "FlowOutcome":
        return cls(kind=OutcomeKind.SELECTED, vault=vault, created=created)

    @classmethod
    def cancelled(cls) -> "FlowOutcome":
        return cls(kind=OutcomeKind.CANCELLED)

    @classmethod
    def failed(cls, error: NotedError) -> "FlowOutcome":
        return cls(kind=OutcomeKind.ERROR, error=error)


def validate_vault_name(text: str) -> str:
    """Return the stripped vault name.

    Raises:
        InputValidationError: If the name is empty.
    """
    name = text.strip()
    if not name:
        raise InputValidationError("Name cannot be empty.")
    return name


class VaultFlow:
    """Top-level vault selection state machine.

    Args:
        store: Registry persistence; loaded at construction, written when a
            vault is selected, created or deleted
        picker_factory: Builds a fresh DirectoryPicker on each entry into
            directory picking
        clock: Timestamp source for new vault configs
    """

    TITLE = "Select a Vault for Noted"

    def __init__(
        self,
        store: ConfigStore,
        picker_factory: Callable[[], DirectoryPicker] = DirectoryPicker,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.registry = VaultRegistry.load(store)
        self.items: list[ListItem] = build_list_items(self.registry.vaults)
        self.highlighted = self._initial_highlight()
        self.state = FlowState.LISTING
        self.picker: DirectoryPicker | None = None
        self.pending_path = ""
        self.name_input = ""
        self.error = ""
        self.delete_position = -1
        self._picker_factory = picker_factory
        self._clock = clock
        self._outcome: FlowOutcome | None = None
        self._outcome_taken = False

    def _initial_highlight(self) -> int:
        current = self.registry.current_vault_path
        for i, item in enumerate(self.items):
            if item.is_vault and item.path == current:
                return i
        return 0

    @property
    def done(self) -> bool:
        return self.state is FlowState.DONE

    @property
    def highlighted_item(self) -> ListItem:
        return self.items[self.highlighted]

    @property
    def outcome(self) -> FlowOutcome | None:
        """Outcome for display; callers consume it with take_outcome()."""
        return self._outcome

    def take_outcome(self) -> FlowOutcome:
        """Return the final outcome. May be called once, after DONE."""
        if not self.done or self._outcome is None:
            raise RuntimeError("Vault flow has not finished")
        if self._outcome_taken:
            raise RuntimeError("Vault flow outcome already taken")
        self._outcome_taken = True
        return self._outcome

    # --- Event handling ---

    def handle_key(self, key: str) -> None:
        """Route one key to the active state."""
        if self.done:
            return
        if key == keys.CTRL_C:
            self._finish(FlowOutcome.cancelled())
            return

        handler = {
            FlowState.LISTING: self._handle_listing,
            FlowState.PICKING_DIRECTORY: self._handle_picking,
            FlowState.NAMING_VAULT: self._handle_naming,
            FlowState.CONFIRMING_DELETION: self._handle_delete_confirm,
        }[self.state]
        handler(key)

    def _handle_listing(self, key: str) -> None:
        if key in ("q", keys.ESC):
            self._finish(FlowOutcome.cancelled())
        elif key == keys.UP:
            self.highlighted = max(0, self.highlighted - 1)
        elif key == keys.DOWN:
            self.highlighted = min(len(self.items) - 1, self.highlighted + 1)
        elif key == keys.ENTER:
            item = self.highlighted_item
            if item.is_vault:
                vault = self.registry.vaults[self.highlighted]
                self._commit(vault, created=False)
            else:
                self._enter_picker()
        elif key == "D":
            if self.highlighted_item.is_vault:
                self.delete_position = self.highlighted
                self.error = ""
                self.state = FlowState.CONFIRMING_DELETION

    def _enter_picker(self) -> None:
        self.picker = self._picker_factory()
        self.pending_path = ""
        self.name_input = ""
        self.error = ""
        self.state = FlowState.PICKING_DIRECTORY

    def _handle_picking(self, key: str) -> None:
        self.picker.handle_key(key)
        if not self.picker.done:
            return

        result = self.picker.result
        self.picker = None
        if result.cancelled:
            self.state = FlowState.LISTING
            return

        self.pending_path = os.path.abspath(result.path)
        self.name_input = os.path.basename(self.pending_path) or self.pending_path
        self.error = ""
        self.state = FlowState.NAMING_VAULT

    def _handle_naming(self, key: str) -> None:
        if key == keys.ESC:
            self._enter_picker()
        elif key == keys.ENTER:
            self._create_vault()
        elif key == keys.BACKSPACE:
            self.name_input = self.name_input[:-1]
            self.error = ""
        elif keys.is_text(key) and len(self.name_input) < NAME_INPUT_LIMIT:
            self.name_input += key
            self.error = ""

    def _handle_delete_confirm(self, key: str) -> None:
        if key in ("y", "Y"):
            self._delete_vault(self.delete_position)
            self.delete_position = -1
            self.state = FlowState.LISTING
        elif key in ("n", "N", keys.ESC):
            self.delete_position = -1
            self.state = FlowState.LISTING

    # --- Side effects ---

    def _create_vault(self) -> None:
        try:
            name = validate_vault_name(self.name_input)
        except InputValidationError as e:
            self.error = str(e)
            return

        now = self._clock() if self._clock else None
        config = build_vault_config(name, self.pending_path, now=now)
        try:
            config_file = write_vault_config(self.pending_path, config)
        except VaultFilesystemError as e:
            self._finish(FlowOutcome.failed(e))
            return

        logger.info(f"Vault created: {name} at {self.pending_path}")
        vault = Vault(
            name=name,
            path=self.pending_path,
            config_path=str(config_file),
            config=config,
        )
        self._commit(vault, created=True)

    def _commit(self, vault: Vault, created: bool) -> None:
        # Only adopt the updated registry once it has been persisted
        updated = VaultRegistry(self.registry.vaults, self.registry.current_vault_path)
        updated.select(vault)
        try:
            updated.save(self.store)
        except RegistryError as e:
            self._finish(FlowOutcome.failed(e))
            return
        self.registry = updated
        self._finish(FlowOutcome.selected(vault, created=created))

    def _delete_vault(self, position: int) -> None:
        vault = self.registry.remove(position)
        # The vault directory and its notes are left in place
        remove_vault_config(vault.path)
        if self.registry.current_vault_path == vault.path:
            self.registry.current_vault_path = ""
        logger.info(f"Vault deleted: {vault.name} at {vault.path}")

        try:
            self.registry.save(self.store)
        except RegistryError as e:
            self.error = str(e)

        self.items = build_list_items(self.registry.vaults)
        self.highlighted = min(self.highlighted, len(self.items) - 1)

    def _finish(self, outcome: FlowOutcome) -> None:
        self._outcome = outcome
        self.state = FlowState.DONE

    # --- Rendering ---

    def view(self) -> str:
        """Plain-text rendering of the current screen."""
        if self.state is FlowState.PICKING_DIRECTORY:
            return self.picker.view()
        if self.state is FlowState.NAMING_VAULT:
            return self._view_naming()
        if self.state is FlowState.CONFIRMING_DELETION:
            return self._view_delete_confirm()
        if self.state is FlowState.DONE:
            return self._view_done()
        return self._view_listing()

    def _view_listing(self) -> str:
        lines = [self.TITLE]
        for i, item in enumerate(self.items):
            marker = ">" if i == self.highlighted else " "
            label = item.label
            if item.is_vault and item.path == self.registry.current_vault_path:
                label += " (current)"
            lines.append(f"{marker} {label}")
        if self.error:
            lines.append(f"✗ {self.error}")
        lines.append("↑/↓: Move   Enter: Select   D: Delete   q: Quit")
        return "\n".join(lines)

    def _view_naming(self) -> str:
        lines = [
            "Enter a name for your new vault (default: folder name):",
            f"> {self.name_input}",
            f"  {self.pending_path}",
        ]
        if self.error:
            lines.append(f"✗ {self.error}")
        lines.append("[Enter] Confirm   [Esc] Back")
        return "\n".join(lines)

    def delete_prompt(self) -> tuple[str, str]:
        """Question and note shown while confirming deletion."""
        vault = self.registry.vaults[self.delete_position]
        return (
            f"Delete vault '{vault.name}'? [y/N]",
            f"{vault.path} and its notes are kept; only the vault config is removed.",
        )

    def _view_delete_confirm(self) -> str:
        return "\n".join(self.delete_prompt())

    def _view_done(self) -> str:
        outcome = self.outcome
        if outcome.kind is OutcomeKind.ERROR:
            return f"Error: {outcome.error}"
        if outcome.kind is OutcomeKind.CANCELLED:
            return "Cancelled."
        return f"✓ Vault set!\nCurrent vault: {outcome.vault.name}\n{outcome.vault.path}"

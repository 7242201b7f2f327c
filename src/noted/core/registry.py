"""Vault registry - the ordered list of known vaults and the current one."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from noted.core.errors import RegistryError
from noted.core.types import Vault

if TYPE_CHECKING:
    from noted.storage.config_store import ConfigStore

logger = logging.getLogger(__name__)


class VaultRegistry:
    """In-memory vault registry.

    Order is insertion order and backs the 1-based indices shown to users.
    current_vault_path may point at a vault that is no longer registered;
    that stale state is tolerated and reported, never silently fixed.
    """

    def __init__(self, vaults: list[Vault] | None = None, current_vault_path: str = ""):
        self.vaults: list[Vault] = list(vaults or [])
        self.current_vault_path = current_vault_path

    @classmethod
    def load(cls, store: ConfigStore) -> VaultRegistry:
        """Build a registry from a config store."""
        return cls(store.load_vaults(), store.get_current_vault_path())

    def save(self, store: ConfigStore) -> None:
        """Persist vaults and current pointer to a config store."""
        store.save_vaults(self.vaults)
        store.set_current_vault_path(self.current_vault_path)

    def __len__(self) -> int:
        return len(self.vaults)

    def __iter__(self):
        return iter(self.vaults)

    def contains(self, path: str) -> bool:
        """True if a vault with this path is registered."""
        return any(v.path == path for v in self.vaults)

    def find_by_name(self, name: str) -> Vault | None:
        """First vault with the given display name, or None."""
        for vault in self.vaults:
            if vault.name == name:
                return vault
        return None

    def find_by_path(self, path: str) -> Vault | None:
        for vault in self.vaults:
            if vault.path == path:
                return vault
        return None

    def get_by_index(self, index: int) -> Vault:
        """Vault at a 1-based index.

        Raises:
            RegistryError: If index is out of range.
        """
        if index < 1 or index > len(self.vaults):
            if not self.vaults:
                raise RegistryError(f"Invalid vault index: {index}. No vaults configured.")
            raise RegistryError(
                f"Invalid vault index: {index}. Valid range: 1-{len(self.vaults)}"
            )
        return self.vaults[index - 1]

    def resolve(self, name_or_index: str) -> Vault:
        """Look up a vault by 1-based index (integer strings) or by name.

        Raises:
            RegistryError: If nothing matches; the message lists what exists.
        """
        try:
            index = int(name_or_index)
        except ValueError:
            vault = self.find_by_name(name_or_index)
            if vault is None:
                raise RegistryError(
                    f"Vault '{name_or_index}' not found.\n{self.describe()}"
                ) from None
            return vault
        return self.get_by_index(index)

    def add(self, vault: Vault) -> bool:
        """Append a vault unless one with the same path exists.

        Returns:
            True if the vault was added.
        """
        if self.contains(vault.path):
            return False
        self.vaults.append(vault)
        return True

    def remove(self, position: int) -> Vault:
        """Remove and return the vault at a 0-based list position."""
        if position < 0 or position >= len(self.vaults):
            raise RegistryError(f"No vault at position {position}")
        return self.vaults.pop(position)

    def select(self, vault: Vault) -> None:
        """Register vault if new and make it current."""
        self.add(vault)
        self.current_vault_path = vault.path

    def current_vault(self) -> Vault | None:
        """The current vault, or None if unset or stale."""
        if not self.current_vault_path:
            return None
        vault = self.find_by_path(self.current_vault_path)
        if vault is None:
            logger.warning(
                f"Current vault {self.current_vault_path} is not in the vault list"
            )
        return vault

    def is_stale(self) -> bool:
        """True if the current pointer is set but matches no registered vault."""
        return bool(self.current_vault_path) and not self.contains(
            self.current_vault_path
        )

    def describe(self) -> str:
        """Human-readable numbered listing of the vaults."""
        if not self.vaults:
            return "No vaults configured."
        lines = ["Available vaults:"]
        for i, vault in enumerate(self.vaults, 1):
            lines.append(f"  {i}. {vault.name} ({vault.path})")
        return "\n".join(lines)

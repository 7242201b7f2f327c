"""Shared types and data structures for Noted."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from noted.core.config import CREATE_VAULT_LABEL
from noted.core.vault import VaultConfig, config_path_for


@dataclass(eq=False)
class Vault:
    """A registered vault: a notes directory plus its sidecar config.

    Identity is the path; the name is only a display label.
    """

    name: str
    path: str
    config_path: str = ""
    config: VaultConfig | None = None

    def __post_init__(self) -> None:
        if not self.config_path:
            self.config_path = str(config_path_for(self.path))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vault):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)


class ItemKind(StrEnum):
    """Kinds of rows in the vault list."""

    VAULT = "vault"
    CREATE = "create"


@dataclass(frozen=True)
class ListItem:
    """One row of the vault list: a real vault or the create action."""

    kind: ItemKind
    name: str = ""
    path: str = ""

    @classmethod
    def for_vault(cls, vault: Vault) -> ListItem:
        return cls(kind=ItemKind.VAULT, name=vault.name, path=vault.path)

    @classmethod
    def create_action(cls) -> ListItem:
        return cls(kind=ItemKind.CREATE)

    @property
    def is_vault(self) -> bool:
        return self.kind is ItemKind.VAULT

    @property
    def label(self) -> str:
        return self.name if self.is_vault else CREATE_VAULT_LABEL


def build_list_items(vaults: list[Vault]) -> list[ListItem]:
    """Vault rows in registry order followed by the trailing create action."""
    items = [ListItem.for_vault(v) for v in vaults]
    items.append(ListItem.create_action())
    return items

"""Noted core library - vaults, registry and path helpers."""

from noted.core.errors import (
    HomeDirectoryError,
    InputValidationError,
    NotedError,
    RegistryError,
    VaultCancelledError,
    VaultFilesystemError,
)
from noted.core.registry import VaultRegistry
from noted.core.types import ListItem, Vault
from noted.core.vault import VaultConfig

__all__ = [
    # Errors
    "HomeDirectoryError",
    "InputValidationError",
    "NotedError",
    "RegistryError",
    "VaultCancelledError",
    "VaultFilesystemError",
    # Types
    "ListItem",
    "Vault",
    "VaultConfig",
    "VaultRegistry",
]

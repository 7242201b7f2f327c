"""Persistence for the vault registry."""

from noted.storage.config_store import ConfigStore, RegistryEntry, YamlConfigStore

__all__ = ["ConfigStore", "RegistryEntry", "YamlConfigStore"]

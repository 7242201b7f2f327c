"""Registry persistence - the YAML config file holding known vaults.

The flow only talks to the ConfigStore protocol; YamlConfigStore is the
on-disk implementation used by the CLI.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from noted.core.config import get_registry_path
from noted.core.errors import RegistryError
from noted.core.types import Vault

logger = logging.getLogger(__name__)


class ConfigStore(Protocol):
    """Persistence contract for the vault registry."""

    def load_vaults(self) -> list[Vault]:
        pass

    def save_vaults(self, vaults: list[Vault]) -> None:
        pass

    def get_current_vault_path(self) -> str:
        pass

    def set_current_vault_path(self, path: str) -> None:
        pass


class RegistryEntry(BaseModel):
    """One vault entry as stored in config.yaml.

    Older config files stored either a bare path string or a JSON-encoded
    {"name", "path"} string per entry; both are accepted on read.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    path: str

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy(cls, data: Any) -> Any:
        if not isinstance(data, str):
            return data
        text = data.strip()
        if text.startswith("{"):
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"invalid JSON vault entry: {e}") from e
        return {"path": text}

    def to_vault(self) -> Vault:
        name = self.name or os.path.basename(self.path.rstrip("/")) or self.path
        return Vault(name=name, path=self.path)

    @classmethod
    def from_vault(cls, vault: Vault) -> "RegistryEntry":
        return cls(name=vault.name, path=vault.path)


def default_config() -> dict[str, Any]:
    """Content of a freshly initialized config.yaml."""
    return {
        "vaults": [],
        "current_vault": "",
        "templates_dir": "",
        "other_settings": {},
    }


class YamlConfigStore:
    """ConfigStore backed by config.yaml in the Noted config directory."""

    def __init__(self, path: Path | str | None = None):
        """
        Initialize the store.

        Args:
            path: Path to config.yaml (defaults to <config dir>/config.yaml)
        """
        self.path = Path(path) if path else get_registry_path()

    def ensure(self) -> bool:
        """Write the default config file if it does not exist.

        Returns:
            True if a new file was created.
        """
        if self.path.exists():
            return False
        self._write(default_config())
        logger.info(f"Initialized new config at {self.path}")
        return True

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return default_config()
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {self.path}: {e}")
            raise RegistryError(f"Invalid YAML in {self.path}: {e}") from e
        except OSError as e:
            raise RegistryError(f"Failed to read config {self.path}: {e}") from e

        if raw is None:
            return default_config()
        if not isinstance(raw, dict):
            raise RegistryError(
                f"{self.path.name} must be a mapping, got {type(raw).__name__}"
            )
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
        except OSError as e:
            logger.error(f"Failed to write config {self.path}: {e}")
            raise RegistryError(f"Failed to write config {self.path}: {e}") from e

    def load_vaults(self) -> list[Vault]:
        raw_vaults = self._read().get("vaults") or []
        if isinstance(raw_vaults, str):
            try:
                raw_vaults = json.loads(raw_vaults)
            except json.JSONDecodeError as e:
                raise RegistryError(f"Invalid vaults value in {self.path}: {e}") from e
        if not isinstance(raw_vaults, list):
            raise RegistryError(
                f"vaults must be a list, got {type(raw_vaults).__name__}"
            )

        vaults: list[Vault] = []
        for raw in raw_vaults:
            try:
                vaults.append(RegistryEntry.model_validate(raw).to_vault())
            except ValidationError as e:
                logger.warning(f"Skipping invalid vault entry {raw!r}: {e}")
        return vaults

    def save_vaults(self, vaults: list[Vault]) -> None:
        data = self._read()
        data["vaults"] = [
            RegistryEntry.from_vault(v).model_dump() for v in vaults
        ]
        self._write(data)

    def get_current_vault_path(self) -> str:
        return str(self._read().get("current_vault") or "")

    def set_current_vault_path(self, path: str) -> None:
        data = self._read()
        data["current_vault"] = path
        self._write(data)

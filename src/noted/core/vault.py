"""Vault sidecar - the vault.json metadata file stored in each vault.

The sidecar is written once when a vault is created and removed when the
vault is deleted from the registry. The vault directory and its notes are
never touched beyond that.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer

from noted.core.config import (
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_SUPPORTED_TYPES,
    HISTORY_LOG_FILENAME,
    TEMPLATES_DIRNAME,
    VAULT_CONFIG_FILENAME,
    VAULT_LOG_FILENAME,
)
from noted.core.errors import VaultFilesystemError

logger = logging.getLogger(__name__)


class VaultConfig(BaseModel):
    """Typed contents of a vault's vault.json sidecar.

    Frozen to prevent accidental mutation. Unknown keys are ignored so
    newer sidecars still load.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    templates_path: str
    log_path: str
    history_path: str
    supported_types: frozenset[str] = Field(
        default_factory=lambda: frozenset(DEFAULT_SUPPORTED_TYPES)
    )
    ignore_patterns: frozenset[str] = Field(
        default_factory=lambda: frozenset(DEFAULT_IGNORE_PATTERNS)
    )
    created_at: datetime
    modified_at: datetime
    metadata: dict[str, str] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)

    @field_serializer("supported_types", "ignore_patterns")
    def _serialize_sorted(self, value: frozenset[str]) -> list[str]:
        return sorted(value)


def config_path_for(vault_path: str | Path) -> Path:
    """Location of the sidecar file inside a vault directory."""
    return Path(vault_path) / VAULT_CONFIG_FILENAME


def build_vault_config(
    name: str, vault_path: str | Path, now: datetime | None = None
) -> VaultConfig:
    """Build the default sidecar config for a new vault.

    Args:
        name: Display name of the vault
        vault_path: Vault directory; templates/log/history paths live under it
        now: Creation timestamp (defaults to the current local time)

    Returns:
        VaultConfig with default supported types and ignore patterns
    """
    root = str(vault_path)
    stamp = now or datetime.now().astimezone()
    return VaultConfig(
        name=name,
        templates_path=os.path.join(root, TEMPLATES_DIRNAME),
        log_path=os.path.join(root, VAULT_LOG_FILENAME),
        history_path=os.path.join(root, HISTORY_LOG_FILENAME),
        created_at=stamp,
        modified_at=stamp,
    )


def write_vault_config(vault_path: str | Path, config: VaultConfig) -> Path:
    """Write config as pretty-printed JSON to <vault_path>/vault.json.

    Creates the vault directory first when it does not exist yet.

    Returns:
        Path of the written sidecar file.

    Raises:
        VaultFilesystemError: If the directory or file cannot be written.
    """
    config_file = config_path_for(vault_path)
    payload = json.dumps(config.model_dump(mode="json"), indent=2, ensure_ascii=False)
    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(payload + "\n", encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write vault config {config_file}: {e}")
        raise VaultFilesystemError(
            f"Failed to write vault config {config_file}: {e}"
        ) from e
    logger.debug(f"Wrote vault config {config_file}")
    return config_file


def read_vault_config(vault_path: str | Path) -> VaultConfig:
    """Load the sidecar config of a vault.

    Raises:
        VaultFilesystemError: If the file is missing, unreadable or invalid.
    """
    config_file = config_path_for(vault_path)
    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError as e:
        raise VaultFilesystemError(
            f"Failed to read vault config {config_file}: {e}"
        ) from e

    try:
        return VaultConfig.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise VaultFilesystemError(f"Invalid JSON in {config_file}: {e}") from e
    except ValidationError as e:
        raise VaultFilesystemError(f"Invalid vault config {config_file}: {e}") from e


def remove_vault_config(vault_path: str | Path) -> bool:
    """Best-effort removal of a vault's sidecar file.

    Returns:
        True if the file was removed, False otherwise. Never raises.
    """
    config_file = config_path_for(vault_path)
    try:
        config_file.unlink()
    except FileNotFoundError:
        logger.debug(f"No vault config to remove at {config_file}")
        return False
    except OSError as e:
        logger.warning(f"Failed to remove vault config {config_file}: {e}")
        return False
    return True

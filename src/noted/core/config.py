"""Configuration management for Noted."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key}: {value!r}, using {default}")
        return default


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# Per-vault sidecar file
VAULT_CONFIG_FILENAME = "vault.json"
TEMPLATES_DIRNAME = "templates"
VAULT_LOG_FILENAME = "vault.log"
HISTORY_LOG_FILENAME = "history.log"
DEFAULT_SUPPORTED_TYPES = (".md", ".pdf")
DEFAULT_IGNORE_PATTERNS = (".git", "node_modules")

# Registry file inside the config directory
REGISTRY_FILENAME = "config.yaml"
CREATE_VAULT_LABEL = "+ Create New Vault"

# Text input limits
PATH_INPUT_LIMIT = get_env_int("NOTED_PATH_INPUT_LIMIT", 256)
NAME_INPUT_LIMIT = get_env_int("NOTED_NAME_INPUT_LIMIT", 64)

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO")


def get_config_dir() -> Path:
    """Resolve the Noted config directory.

    $NOTED_CONFIG_DIR wins, then $XDG_CONFIG_HOME/noted, then ~/.config/noted.
    Read at call time so tests and the CLI can redirect it.
    """
    override = get_env("NOTED_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    xdg_config = get_env("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "noted"
    return Path.home() / ".config" / "noted"


def ensure_config_dir() -> Path:
    """Create the config directory if missing and return it."""
    config_dir = get_config_dir()
    if not config_dir.exists():
        config_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created config directory at {config_dir}")
    return config_dir


def get_registry_path() -> Path:
    """Path to the YAML registry file."""
    return get_config_dir() / REGISTRY_FILENAME


def is_debug_enabled(flag: bool = False) -> bool:
    """True if --debug was passed or NOTED_DEBUG is set to a true value."""
    return flag or get_env_bool("NOTED_DEBUG")


def get_log_file() -> Path:
    """Path to the log file used while the terminal UI owns the screen."""
    override = get_env("NOTED_LOG_FILE")
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "noted.log"


def setup_logging(debug: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Configure and return logger.

    When log_file is given, records go there instead of stderr so they
    don't tear through the interactive screens.
    """
    level = logging.DEBUG if debug else getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    kwargs: dict = {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "level": level,
    }
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        kwargs["filename"] = str(log_file)
    logging.basicConfig(**kwargs)
    return logging.getLogger("noted")

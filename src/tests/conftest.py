"""Shared test fixtures and configuration."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from noted.core.types import Vault


class InMemoryConfigStore:
    """ConfigStore fake keeping the registry in memory."""

    def __init__(self, vaults: list[Vault] | None = None, current: str = ""):
        self.vaults = list(vaults or [])
        self.current = current
        self.save_count = 0

    def load_vaults(self) -> list[Vault]:
        return list(self.vaults)

    def save_vaults(self, vaults: list[Vault]) -> None:
        self.vaults = list(vaults)
        self.save_count += 1

    def get_current_vault_path(self) -> str:
        return self.current

    def set_current_vault_path(self, path: str) -> None:
        self.current = path


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Fake home directory with a few subdirectories and a file."""
    home_dir = tmp_path / "home"
    for name in ("Documents", "Downloads", "projects", "archive"):
        (home_dir / name).mkdir(parents=True)
    (home_dir / "file.txt").write_text("not a directory")
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Point the Noted config directory at a temp dir."""
    path = tmp_path / "config" / "noted"
    monkeypatch.setenv("NOTED_CONFIG_DIR", str(path))
    monkeypatch.setenv("NOTED_LOG_FILE", str(tmp_path / "noted.log"))
    return path


@pytest.fixture
def make_store():
    """Factory for in-memory config stores."""

    def _make_store(vaults: list[Vault] | None = None, current: str = ""):
        return InMemoryConfigStore(vaults, current)

    return _make_store


@pytest.fixture
def make_vault(tmp_path):
    """Factory for vaults backed by real directories."""

    def _make_vault(name: str, dirname: str | None = None) -> Vault:
        path = tmp_path / "vaults" / (dirname or name.lower())
        path.mkdir(parents=True, exist_ok=True)
        return Vault(name=name, path=str(path))

    return _make_vault


@pytest.fixture
def fixed_now():
    """A fixed, timezone-aware timestamp."""
    return datetime(2025, 1, 28, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def press():
    """Feed keys to a picker or flow.

    Named keys ("enter", "down", ...) are sent as-is; any other string is
    typed character by character.
    """
    named = {"up", "down", "left", "right", "enter", "esc", "backspace", "tab", "ctrl+c"}

    def _press(target, *keys_or_text: str) -> None:
        for item in keys_or_text:
            if item in named:
                target.handle_key(item)
            else:
                for ch in item:
                    target.handle_key(ch)

    return _press

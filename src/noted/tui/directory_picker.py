"""Directory picker - choose a directory by typing a prefix or browsing.

The picker is a small state machine: it stays BROWSING while keys come in
and moves to RESOLVED exactly once, carrying either a chosen path or a
cancellation. The owner reads ``result`` and throws the picker away.
"""

import logging
import os
from dataclasses import dataclass
from enum import StrEnum

from noted.core.config import PATH_INPUT_LIMIT
from noted.core.errors import HomeDirectoryError, InputValidationError
from noted.core.paths import expand_path, home_dir, list_subdirectories
from noted.tui import keys

logger = logging.getLogger(__name__)

MAX_VISIBLE = 10


class PickerState(StrEnum):
    BROWSING = "browsing"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class PickerResult:
    """Terminal result of a picker: a path, or cancelled=True."""

    path: str = ""
    cancelled: bool = False


def parse_path_input(text: str) -> str:
    """Validate and expand a typed directory path.

    Raises:
        InputValidationError: If the path is empty or cannot be expanded.
    """
    if not text.strip():
        raise InputValidationError("Path cannot be empty.")
    try:
        return expand_path(text)
    except HomeDirectoryError as e:
        raise InputValidationError(f"Invalid path: {e}") from e


def _default_root() -> str:
    try:
        return home_dir()
    except HomeDirectoryError as e:
        logger.warning(f"{e}; browsing from filesystem root")
        return os.sep


class DirectoryPicker:
    """Type-ahead directory browser.

    An empty input shows the subdirectories of the root (the home directory
    by default). Typing filters the subdirectories of the typed path's
    parent down to those starting with the typed path; if none match, the
    typed path itself is offered so directories that don't exist yet can
    still be chosen.
    """

    PLACEHOLDER = "~/Documents"

    def __init__(self, root: str | None = None):
        """
        Initialize picker.

        Args:
            root: Directory listed while the input is empty (defaults to home)
        """
        self.root = root or _default_root()
        self.root_dirs = list_subdirectories(self.root)
        self.input_text = ""
        self.candidates: list[str] = list(self.root_dirs)
        self.highlighted = 0
        self.error = ""
        self.state = PickerState.BROWSING
        self.result: PickerResult | None = None

    @property
    def done(self) -> bool:
        return self.state is PickerState.RESOLVED

    def handle_key(self, key: str) -> None:
        """Process one key. Keys after resolution are ignored."""
        if self.done:
            return

        if key in (keys.ESC, keys.CTRL_C):
            self._resolve(PickerResult(cancelled=True))
        elif key == keys.ENTER:
            self._confirm()
        elif key == keys.UP:
            self._move(-1)
        elif key == keys.DOWN:
            self._move(1)
        elif key == keys.BACKSPACE:
            if self.input_text:
                self.set_input(self.input_text[:-1])
        elif keys.is_text(key):
            if len(self.input_text) < PATH_INPUT_LIMIT:
                self.set_input(self.input_text + key)

    def set_input(self, text: str) -> None:
        """Replace the input text and re-filter the candidates."""
        self.input_text = text
        self.error = ""
        self.candidates = self.filter_candidates(text)
        self._clamp()

    def filter_candidates(self, text: str) -> list[str]:
        """Candidates for a typed prefix (see class docstring)."""
        if not text:
            return list(self.root_dirs)

        try:
            base = expand_path(text)
        except HomeDirectoryError as e:
            self.error = str(e)
            return [text]

        parent = os.path.dirname(base)
        if parent in ("", ".", os.sep):
            parent = self.root

        matches = [d for d in list_subdirectories(parent) if d.startswith(base)]
        if not matches and base:
            matches = [base]
        return matches

    def _move(self, delta: int) -> None:
        self.highlighted += delta
        self._clamp()

    def _clamp(self) -> None:
        if not self.candidates:
            self.highlighted = 0
            return
        self.highlighted = max(0, min(self.highlighted, len(self.candidates) - 1))

    def _confirm(self) -> None:
        if 0 <= self.highlighted < len(self.candidates):
            self._resolve(PickerResult(path=self.candidates[self.highlighted]))
            return

        try:
            path = parse_path_input(self.input_text)
        except InputValidationError as e:
            self.error = str(e)
            return
        self._resolve(PickerResult(path=path))

    def _resolve(self, result: PickerResult) -> None:
        self.result = result
        self.state = PickerState.RESOLVED
        logger.debug(f"Directory picker resolved: {result}")

    def visible_candidates(self, limit: int = MAX_VISIBLE) -> list[tuple[int, str]]:
        """Window of (index, path) pairs that keeps the highlight on screen."""
        start = max(0, self.highlighted - limit + 1)
        window = self.candidates[start : start + limit]
        return list(enumerate(window, start))

    def view(self) -> str:
        """Plain-text rendering of the picker."""
        if self.done:
            return ""
        lines = ["Select or enter a directory:"]
        lines.append(f"> {self.input_text or self.PLACEHOLDER}")
        for i, path in self.visible_candidates():
            marker = ">" if i == self.highlighted else " "
            lines.append(f"{marker} {path}")
        if self.error:
            lines.append(f"✗ {self.error}")
        lines.append("[Enter] Select   [↑/↓] Navigate   [Esc] Cancel")
        return "\n".join(lines)

"""Path helpers: home expansion and directory listing."""

import logging
import os
from pathlib import Path

from noted.core.errors import HomeDirectoryError

logger = logging.getLogger(__name__)


def home_dir() -> str:
    """Return the user's home directory as an absolute path string.

    Raises:
        HomeDirectoryError: If the home directory cannot be determined.
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirectoryError(f"Could not determine home directory: {e}") from e
    if not home.is_absolute():
        raise HomeDirectoryError(f"Could not determine home directory: got {home}")
    return str(home)


def expand_path(path: str) -> str:
    """Expand a leading ~ to the home directory.

    Anything after the ~ is joined onto the home directory, so "~/notes"
    and "~notes" both land under home. Other input is returned unchanged.
    """
    if not path.startswith("~"):
        return path
    home = home_dir()
    rest = path[1:].lstrip("/" + os.sep)
    if not rest:
        return home
    return os.path.join(home, rest)


def list_subdirectories(base: str) -> list[str]:
    """List immediate subdirectories of base as full paths, sorted.

    On any read failure returns [base] so a browser never dead-ends.
    """
    try:
        with os.scandir(base) as entries:
            dirs = [
                os.path.join(base, entry.name)
                for entry in entries
                if entry.is_dir()
            ]
    except OSError as e:
        logger.debug(f"Cannot list {base}: {e}")
        return [base]
    dirs.sort()
    return dirs

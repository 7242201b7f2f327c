"""Keyboard input for the terminal UI.

Keys are plain strings: named keys use the constants below, printable
characters are passed through as the character itself.
"""

import codecs
import logging
import os
import sys

logger = logging.getLogger(__name__)

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
ENTER = "enter"
ESC = "esc"
BACKSPACE = "backspace"
TAB = "tab"
CTRL_C = "ctrl+c"

# Escape sequences (without the leading ESC)
_ESCAPE_SEQUENCES = {
    "[A": UP,
    "[B": DOWN,
    "[C": RIGHT,
    "[D": LEFT,
    "OA": UP,
    "OB": DOWN,
    "OC": RIGHT,
    "OD": LEFT,
}

_CONTROL_KEYS = {
    "\r": ENTER,
    "\n": ENTER,
    "\t": TAB,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
    "\x03": CTRL_C,
}

# msvcrt scan codes following a \x00 or \xe0 prefix
_WINDOWS_SCAN_CODES = {"H": UP, "P": DOWN, "K": LEFT, "M": RIGHT}


def decode_key(ch: str, sequence: str = "") -> str | None:
    """Translate a raw character (plus any escape sequence) into a key name.

    Returns None for input that maps to no key.
    """
    if ch == "\x1b":
        if not sequence:
            return ESC
        return _ESCAPE_SEQUENCES.get(sequence)
    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch and ch.isprintable():
        return ch
    return None


def is_text(key: str) -> bool:
    """True if key is a single printable character to insert into a text field."""
    return len(key) == 1 and key.isprintable()


class KeyReader:
    """Reads single keys from the terminal in cbreak mode.

    Output processing and signals stay on, so rich can keep drawing and
    ctrl+c still arrives as KeyboardInterrupt.

    Use as a context manager so the terminal mode is always restored:

        with KeyReader() as reader:
            key = reader.read_key()
    """

    ESCAPE_TIMEOUT = 0.05

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._old_settings = None

    def __enter__(self) -> "KeyReader":
        if os.name != "nt":
            import termios
            import tty

            fd = self.stream.fileno()
            self._old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._old_settings is not None:
            import termios

            termios.tcsetattr(
                self.stream.fileno(), termios.TCSADRAIN, self._old_settings
            )
            self._old_settings = None

    def read_key(self) -> str:
        """Block until a recognised key is pressed and return its name."""
        while True:
            if os.name == "nt":
                key = self._read_windows()
            else:
                key = self._read_posix()
            if key is not None:
                return key
            logger.debug("Ignoring unmapped input")

    def _read_char(self) -> str:
        # os.read bypasses the text buffer so select() sees pending bytes
        fd = self.stream.fileno()
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = os.read(fd, 1)
            if not data:
                raise EOFError("terminal input closed")
            ch = decoder.decode(data)
            if ch:
                return ch

    def _read_posix(self) -> str | None:
        import select

        ch = self._read_char()
        if ch != "\x1b":
            return decode_key(ch)

        sequence = ""
        for _ in range(5):
            ready, _, _ = select.select([self.stream], [], [], self.ESCAPE_TIMEOUT)
            if not ready:
                break
            nxt = self._read_char()
            sequence += nxt
            if len(sequence) > 1 and (nxt.isalpha() or nxt == "~"):
                break
        return decode_key(ch, sequence)

    def _read_windows(self) -> str | None:
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            return _WINDOWS_SCAN_CODES.get(msvcrt.getwch())
        return decode_key(ch)

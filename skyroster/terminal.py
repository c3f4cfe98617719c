"""Raw keyboard input, cursor placement and line editing for the text console."""

from __future__ import annotations

import re
import string
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, TextIO

try:
    import msvcrt
except ImportError:
    msvcrt = None

try:
    import termios
except ImportError:
    termios = None

ESC_CHAR = "\x1b"

_POSIX_ARROWS = {"A": "UP", "B": "DOWN", "C": "RIGHT", "D": "LEFT"}
_WINDOWS_ARROWS = {"H": "UP", "P": "DOWN", "K": "LEFT", "M": "RIGHT"}
_WINDOWS_PREFIXES = ("\xe0", "\x00")

_DATE_READ = re.compile(r"\d+/\d+/\d+")
_TIME_READ = re.compile(r"\d+:\d+")


class Key(Enum):
    """Kind of key read from the keyboard."""

    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    ENTER = auto()
    ESC = auto()
    TAB = auto()
    BACKSPACE = auto()
    CHAR = auto()
    OTHER = auto()


@dataclass(frozen=True)
class KeyPress:
    """A decoded key; ``char`` holds the typed character for ``Key.CHAR``."""

    key: Key
    char: str = ""

    @property
    def is_arrow(self) -> bool:
        """True for the four arrow keys."""
        return self.key in (Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT)


def read_raw_char() -> str:
    """Read one character from the keyboard without echo or line buffering."""
    if msvcrt is not None:
        return msvcrt.getwch()
    if termios is None or not sys.stdin.isatty():
        ch = sys.stdin.read(1)
    else:
        fd = sys.stdin.fileno()
        old = termios.tcgetattr(fd)
        new = termios.tcgetattr(fd)
        new[3] &= ~(termios.ICANON | termios.ECHO)
        termios.tcsetattr(fd, termios.TCSANOW, new)
        try:
            ch = sys.stdin.read(1)
        finally:
            termios.tcsetattr(fd, termios.TCSANOW, old)
    if ch == "":
        raise EOFError("keyboard input closed")
    return ch


class Terminal:
    """Keyboard reader and screen writer; both can be replaced for scripted use."""

    def __init__(
        self,
        reader: Optional[Callable[[], str]] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self._reader = reader if reader is not None else read_raw_char
        self._out = out if out is not None else sys.stdout

    def read_key(self) -> KeyPress:
        """Read and decode one key, including arrow-key sequences."""
        ch = self._reader()
        if ch in _WINDOWS_PREFIXES:
            name = _WINDOWS_ARROWS.get(self._reader())
            return KeyPress(Key[name]) if name else KeyPress(Key.OTHER)
        if ch == ESC_CHAR:
            if self._reader() == "[":
                name = _POSIX_ARROWS.get(self._reader())
                return KeyPress(Key[name]) if name else KeyPress(Key.OTHER)
            return KeyPress(Key.ESC)
        if ch in ("\r", "\n"):
            return KeyPress(Key.ENTER)
        if ch == "\t":
            return KeyPress(Key.TAB)
        if ch in ("\x7f", "\b"):
            return KeyPress(Key.BACKSPACE)
        return KeyPress(Key.CHAR, ch)

    def goto(self, x: int, y: int) -> None:
        """Move the cursor to column ``x`` and row ``y``, both counted from zero."""
        self.write(f"\033[{y + 1};{x + 1}H")

    def write(self, text: str) -> None:
        """Write text at the cursor."""
        self._out.write(text)
        self._out.flush()

    def clear(self) -> None:
        """Clear the screen and home the cursor."""
        self.write("\033[2J\033[H")

    def _box(self, lines: list[str], left: int = 44) -> None:
        width = max(len(line) for line in lines) + 10
        pad = " " * left
        self.write("\n" + pad + " " + "_" * width + " \n")
        self.write(pad + "|" + " " * width + "|\n")
        for line in lines:
            self.write(pad + "|" + line.center(width) + "|\n")
        self.write(pad + "|" + "_" * width + "|\n")

    def notify(self, message: str) -> None:
        """Show a boxed message and wait for any key."""
        self.clear()
        self._box([message])
        self.write("\n\n" + " " * 80 + "Press any key to continue...")
        self.read_key()

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; arrows move between the answers, Enter picks one."""
        self.clear()
        self._box([question, "", "YES", "NO"])
        row = 0
        column = 40
        first_row = 5
        while True:
            for r in range(2):
                self.goto(column, first_row + r)
                self.write(">>" if r == row else "  ")
            self.goto(0, 0)
            press = self.read_key()
            if press.key is Key.UP and row > 0:
                row -= 1
            elif press.key is Key.DOWN and row < 1:
                row += 1
            elif press.key is Key.ENTER:
                return row == 0


def edit_field(
    terminal: Terminal,
    text: str,
    max_len: int,
    accept: Callable[[str], Optional[str]],
) -> tuple[str, KeyPress]:
    """Edit ``text`` in place until an arrow, Enter, Esc or Tab is pressed.

    ``accept`` returns the character to insert, possibly changed, or None to
    reject it. The text never grows beyond ``max_len - 1`` characters.
    Returns the edited text and the key that ended editing.
    """
    while True:
        press = terminal.read_key()
        if press.is_arrow or press.key in (Key.ENTER, Key.ESC, Key.TAB, Key.OTHER):
            return text, press
        if press.key is Key.BACKSPACE:
            if text:
                terminal.write("\b \b")
                text = text[:-1]
        elif len(text) < max_len - 1:
            ch = accept(press.char)
            if ch is not None:
                terminal.write(ch)
                text += ch


def normalize_date_text(text: str) -> str:
    """Zero-pad a one-digit day and month of a ``d/m/y`` entry."""
    if not _DATE_READ.match(text):
        return text
    if len(text) > 1 and text[1] == "/":
        text = "0" + text
    if len(text) > 4 and text[4] == "/":
        text = text[:3] + "0" + text[3:]
    return text


def normalize_time_text(text: str) -> str:
    """Zero-pad a one-digit hour and minute of an ``h:m`` entry."""
    if not _TIME_READ.match(text):
        return text
    if len(text) > 1 and text[1] == ":":
        text = "0" + text
    if len(text) == 4:
        text = text[:3] + "0" + text[3:]
    return text


def _upper(ch: str) -> str:
    return ch.upper() if ch in string.ascii_lowercase else ch


def accept_id_char(ch: str) -> Optional[str]:
    """Letters (upper-cased) and digits, as used in plane and flight IDs."""
    ch = _upper(ch)
    return ch if ch in string.ascii_uppercase or ch in string.digits else None


def accept_name_char(ch: str) -> Optional[str]:
    """Letters (upper-cased) and spaces, as used in names and destinations."""
    ch = _upper(ch)
    return ch if ch in string.ascii_uppercase or ch == " " else None


def accept_plane_type_char(ch: str) -> Optional[str]:
    """Letters (upper-cased), digits and spaces."""
    ch = _upper(ch)
    if ch in string.ascii_uppercase or ch in string.digits or ch == " ":
        return ch
    return None


def accept_digit(ch: str) -> Optional[str]:
    """Decimal digits only."""
    return ch if ch in string.digits else None


def accept_date_char(ch: str) -> Optional[str]:
    """Digits and the date separator."""
    return ch if ch in string.digits or ch == "/" else None


def accept_time_char(ch: str) -> Optional[str]:
    """Digits and the time separator."""
    return ch if ch in string.digits or ch == ":" else None
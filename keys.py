"""
Keyboard events as seen by the app.

The terminal layer translates whatever its library reports into ``Key``
values, so the mode controller never depends on a rendering library.
"""

from typing import NamedTuple

CHAR = "char"
ENTER = "enter"
ESCAPE = "escape"
TAB = "tab"
BACKSPACE = "backspace"
LEFT = "left"
RIGHT = "right"
UP = "up"
DOWN = "down"
UNKNOWN = "unknown"


class Key(NamedTuple):
    name: str
    char: str = ""

    @classmethod
    def from_char(cls, char: str) -> "Key":
        return cls(CHAR, char)

    @property
    def is_char(self) -> bool:
        return self.name == CHAR and bool(self.char)

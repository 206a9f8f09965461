"""
Single-line text input with a cursor and an edit/normal mode.
"""

from enum import Enum


class InputMode(Enum):
    NORMAL = "normal"
    EDITING = "editing"


class TextField:
    """Text buffer, cursor position, input mode and a log of submitted values.

    Every operation is total: cursor moves are clamped to ``[0, len(text)]``.
    """

    def __init__(self, label: str):
        self._label = label
        self._text = ""
        self._cursor = 0
        self._mode = InputMode.NORMAL
        self._submitted: list[str] = []

    @property
    def label(self) -> str:
        return self._label

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def submitted(self) -> list[str]:
        return list(self._submitted)

    @property
    def is_editing(self) -> bool:
        return self._mode is InputMode.EDITING

    def _clamp(self, position: int) -> int:
        return max(0, min(position, len(self._text)))

    def insert(self, char: str):
        """Insert *char* at the cursor and advance the cursor"""
        self._text = self._text[: self._cursor] + char + self._text[self._cursor :]
        self.move_right()

    def delete_backward(self):
        """Remove the character left of the cursor; no-op at position 0"""
        if self._cursor == 0:
            return
        self._text = self._text[: self._cursor - 1] + self._text[self._cursor :]
        self.move_left()

    def move_left(self):
        self._cursor = self._clamp(self._cursor - 1)

    def move_right(self):
        self._cursor = self._clamp(self._cursor + 1)

    def submit(self):
        """Append the buffer to the submission log, then clear it"""
        self._submitted.append(self._text)
        self.clear()

    def last_submitted(self) -> str:
        return self._submitted[-1] if self._submitted else ""

    def clear(self):
        self._text = ""
        self._cursor = 0

    def set_mode(self, mode: InputMode):
        self._mode = mode

    def get_mode(self) -> InputMode:
        return self._mode

    def set_text(self, text: str):
        self._text = text
        self._cursor = len(text)

    def get_text(self) -> str:
        return self._text

    def display_state(self) -> dict:
        return {
            "label": self._label,
            "text": self._text,
            "cursor": self._cursor,
            "editing": self.is_editing,
        }

    def __repr__(self):
        return (
            f"TextField({self._label!r}, text={self._text!r}, "
            f"cursor={self._cursor}, mode={self._mode.value})"
        )

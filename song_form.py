"""
Popup form holding the five editable fields of one song.

Fields are kept in a fixed order (title, artist, album, year, media type) and
at most one of them is in editing mode at a time. Tab moves the focus to the
next field, wrapping from the last field back to the first.
"""

import logging

import constants as cv
from songs import make_song, song_fields_as_text
from text_field import InputMode, TextField

logger = logging.getLogger(__name__)


class FormValidationError(ValueError):
    """Raised when a form cannot be turned into a song"""


def cycle_index(current, count):
    """Return the index after *current*, wrapping to 0 after ``count - 1``"""
    if count <= 0:
        raise ValueError("count must be positive")
    return (current + 1) % count


class SongForm:
    """Create/edit popup state"""

    def __init__(self, title, song_id=0):
        self.title = title
        self.song_id = song_id
        self.fields = [TextField(label) for label in cv.FIELD_LABELS]
        self.error = None

    @property
    def year_field(self):
        return self.fields[cv.YEAR_FIELD_INDEX]

    @property
    def active_index(self):
        """Index of the field in editing mode, or None"""
        for index, field in enumerate(self.fields):
            if field.is_editing:
                return index
        return None

    @property
    def active_field(self):
        index = self.active_index
        return None if index is None else self.fields[index]

    def has_all_fields_filled(self):
        return all(field.get_text() for field in self.fields)

    def any_field_editing(self):
        return any(field.is_editing for field in self.fields)

    def set_all_modes(self, mode):
        for field in self.fields:
            field.set_mode(mode)

    def focus(self, index):
        """Make field *index* the only field in editing mode"""
        self.set_all_modes(InputMode.NORMAL)
        self.fields[index].set_mode(InputMode.EDITING)

    def focus_first_if_none(self):
        if not self.any_field_editing():
            self.focus(0)

    def next_field(self):
        """Tab: move editing focus to the next field (title if none is focused)"""
        index = self.active_index
        self.focus(0 if index is None else cycle_index(index, len(self.fields)))

    def clear_all(self):
        for field in self.fields:
            field.clear()
        self.error = None

    def populate_from(self, song):
        """Copy *song* into the fields and remember its id for the update"""
        self.song_id = song.get("id", 0)
        for field, text in zip(self.fields, song_fields_as_text(song)):
            field.set_text(text)

    def to_song(self):
        """Flush every field and build a song dict from the submitted values

        Raises:
            FormValidationError: If the year is not an integer. The fields keep
                their text so the user can correct it.
        """
        year_text = self.year_field.get_text()
        try:
            release_year = int(year_text)
        except ValueError:
            self.error = f"Year must be a whole number, got {year_text!r}"
            logger.warning("%s: %s", self.title, self.error)
            raise FormValidationError(self.error) from None

        for field in self.fields:
            field.submit()
        title, artist, album, _, media_type = (
            field.last_submitted() for field in self.fields
        )
        self.error = None
        return make_song(self.song_id, title, artist, album, release_year, media_type)

    def display_state(self):
        return {
            "title": self.title,
            "fields": [field.display_state() for field in self.fields],
            "error": self.error,
        }

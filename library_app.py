"""
Keyboard-driven state machine behind the music library TUI.

``LibraryApp`` owns everything the screen shows: the current mode, the
selected table row, the displayed songs, the search bar and the create/edit
popups. The terminal layer feeds it one ``keys.Key`` at a time through
``handle_key`` and draws ``view_state()`` between keystrokes.

Modes:
  BROWSING           table navigation, single-letter commands
  SEARCHING          search bar has focus, results update as you type
  CREATING           "New Song" popup
  EDITING            "Edit Song" popup, pre-filled from the selected row
  CONFIRMING_DELETE  "Delete Song" confirmation (Shift+Y deletes)
  EXITING            terminal state, the main loop stops

Every mode except BROWSING and EXITING captures the keyboard: Escape
returns to BROWSING from any of them.
"""

import logging
import string
from enum import Enum

import constants as cv
import keys
from selection import EmptySelectionError, resolve
from song_form import FormValidationError, SongForm
from song_library import DataAccessError
from songs import empty_song, load_failure_song, search_failure_song
from text_field import InputMode, TextField

logger = logging.getLogger(__name__)


class AppMode(Enum):
    BROWSING = "browsing"
    SEARCHING = "searching"
    CREATING = "creating"
    EDITING = "editing"
    CONFIRMING_DELETE = "confirming_delete"
    EXITING = "exiting"

    @property
    def captures_input(self):
        """True while keystrokes go to a modal widget instead of the table"""
        return self not in (AppMode.BROWSING, AppMode.EXITING)


class LibraryApp:
    """Application state and keystroke dispatch

    Args:
        library: Persistence handle with fetch_all, fetch_matching, insert,
            update and delete (see song_library.SongLibrary)
    """

    def __init__(self, library):
        self.library = library
        self.mode = AppMode.BROWSING
        self.selected_row = 0
        self.songs = []
        self.showing_placeholder = False
        self.status = None

        self.search_bar = TextField("Search")
        self.create_form = SongForm("New Song")
        self.edit_form = SongForm("Edit Song")

        self._browse_handlers = {
            "q": self.exit,
            "/": self.open_search,
            "n": self.open_create,
            "e": self.open_edit,
            "d": self.open_delete,
            "k": lambda: self.move_selection(-1),
            "j": lambda: self.move_selection(1),
        }
        self._browse_named_handlers = {
            keys.UP: lambda: self.move_selection(-1),
            keys.DOWN: lambda: self.move_selection(1),
        }
        self._capture_handlers = {
            AppMode.SEARCHING: self._handle_search_key,
            AppMode.CREATING: self._handle_create_key,
            AppMode.EDITING: self._handle_edit_key,
            AppMode.CONFIRMING_DELETE: self._handle_delete_key,
        }

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def capture(self):
        return self.mode.captures_input

    @property
    def is_running(self):
        return self.mode is not AppMode.EXITING

    def view_state(self):
        """Read-only snapshot of everything the renderer needs"""
        return {
            "mode": self.mode,
            "capture": self.capture,
            "selected_row": self.selected_row,
            "songs": [dict(song) for song in self.songs],
            "search": self.search_bar.display_state(),
            "create_form": self.create_form.display_state(),
            "edit_form": self.edit_form.display_state(),
            "status": self.status,
        }

    # ------------------------------------------------------------------
    # Result set
    # ------------------------------------------------------------------

    def load(self):
        """Load every song; call once before the first render"""
        self.refresh_all()

    def refresh_all(self):
        try:
            songs = self.library.fetch_all()
        except DataAccessError as err:
            logger.error("Error getting songs from database: %s", err)
            self.status = str(err)
            self._set_songs([load_failure_song()], placeholder=True)
            return
        self._set_songs(songs)

    def run_search(self, keyword):
        try:
            songs = self.library.fetch_matching(keyword)
        except DataAccessError as err:
            logger.error("Error searching for songs matching %r: %s", keyword, err)
            self.status = str(err)
            self._set_songs([search_failure_song()], placeholder=True)
            return
        self._set_songs(songs)

    def _set_songs(self, songs, placeholder=False):
        self.songs = list(songs)
        self.showing_placeholder = placeholder
        if self.selected_row >= len(self.songs):
            self.selected_row = max(len(self.songs) - 1, 0)

    def move_selection(self, step):
        """Move the selected row by *step*, wrapping around both ends"""
        if not self.songs:
            self.selected_row = 0
            return
        self.selected_row = (self.selected_row + step) % len(self.songs)

    def selected_song(self):
        """Return the song at the selected row

        Raises:
            EmptySelectionError: If there is no real song to select
        """
        if self.showing_placeholder:
            logger.error("Cannot select a placeholder row")
            raise EmptySelectionError("No songs loaded")
        return resolve(self.songs, self.selected_row)

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    def exit(self):
        self.mode = AppMode.EXITING

    def open_search(self):
        self.mode = AppMode.SEARCHING
        self.search_bar.set_mode(InputMode.EDITING)

    def open_create(self):
        self.mode = AppMode.CREATING
        self.create_form.focus_first_if_none()

    def open_edit(self):
        self.edit_form.clear_all()
        try:
            song = self.selected_song()
        except EmptySelectionError as err:
            # Nothing to edit: offer to add a song instead
            self.status = f"{err}. Add a song first."
            self.edit_form.populate_from(empty_song())
            self.open_create()
            return
        self.mode = AppMode.EDITING
        self.edit_form.populate_from(song)
        self.edit_form.focus_first_if_none()

    def open_delete(self):
        self.mode = AppMode.CONFIRMING_DELETE

    def cancel(self):
        """Escape: leave any popup or the search bar"""
        self.mode = AppMode.BROWSING
        self.search_bar.set_mode(InputMode.NORMAL)
        self.create_form.set_all_modes(InputMode.NORMAL)
        self.edit_form.set_all_modes(InputMode.NORMAL)

    # ------------------------------------------------------------------
    # Keystroke dispatch
    # ------------------------------------------------------------------

    def handle_key(self, key):
        """Apply one keystroke to the app state; ignored once exiting"""
        if not self.is_running:
            return
        self.status = None
        if not self.capture:
            self._handle_browse_key(key)
            return
        if key.name == keys.ESCAPE:
            self.cancel()
            return
        self._capture_handlers[self.mode](key)

    def _handle_browse_key(self, key):
        if key.is_char:
            handler = self._browse_handlers.get(key.char)
        else:
            handler = self._browse_named_handlers.get(key.name)
        if handler is not None:
            handler()

    def _handle_search_key(self, key):
        field = self.search_bar
        if key.is_char:
            field.insert(key.char)
            self.run_search(field.get_text())
        elif key.name == keys.BACKSPACE:
            field.delete_backward()
            self.run_search(field.get_text())
        elif key.name == keys.LEFT:
            field.move_left()
        elif key.name == keys.RIGHT:
            field.move_right()
        elif key.name == keys.ENTER:
            self.run_search(field.get_text())
            field.submit()
            field.set_mode(InputMode.NORMAL)
            self.mode = AppMode.BROWSING

    def _handle_create_key(self, key):
        if key.name == keys.ENTER:
            if self.create_form.has_all_fields_filled():
                self._submit_create()
            return
        self._route_form_key(self.create_form, key, field_submit=False)

    def _handle_edit_key(self, key):
        # A filled form submits as a whole; otherwise Enter flushes the focused field
        if key.name == keys.ENTER and self.edit_form.has_all_fields_filled():
            self._submit_edit()
            return
        self._route_form_key(self.edit_form, key, field_submit=True)

    def _handle_delete_key(self, key):
        if key.is_char and key.char == "Y":
            self._confirm_delete()

    def _route_form_key(self, form, key, field_submit):
        """Send *key* to the focused field of *form*"""
        form.focus_first_if_none()
        index = form.active_index
        field = form.fields[index]

        if key.name == keys.TAB:
            form.next_field()
        elif key.is_char:
            if index == cv.YEAR_FIELD_INDEX and key.char not in string.digits:
                return
            field.insert(key.char)
        elif key.name == keys.BACKSPACE:
            field.delete_backward()
        elif key.name == keys.LEFT:
            field.move_left()
        elif key.name == keys.RIGHT:
            field.move_right()
        elif key.name == keys.ENTER and field_submit:
            field.submit()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _close_form(self, form):
        form.set_all_modes(InputMode.NORMAL)
        self.mode = AppMode.BROWSING

    def _submit_create(self):
        try:
            song = self.create_form.to_song()
        except FormValidationError as err:
            self.status = str(err)
            return
        try:
            self.library.insert(song)
        except DataAccessError as err:
            logger.error("Error adding song %r: %s", song["title"], err)
            self.status = str(err)
        else:
            self.status = f"Added \"{song['title']}\""
        self._close_form(self.create_form)
        self.refresh_all()

    def _submit_edit(self):
        song_id = self.edit_form.song_id
        try:
            song = self.edit_form.to_song()
        except FormValidationError as err:
            self.status = str(err)
            return
        try:
            self.library.update(song_id, song)
        except DataAccessError as err:
            logger.error("Error updating song %d: %s", song_id, err)
            self.status = str(err)
        else:
            self.status = f"Updated \"{song['title']}\""
        self._close_form(self.edit_form)
        self.refresh_all()

    def _confirm_delete(self):
        try:
            song = self.selected_song()
        except EmptySelectionError as err:
            self.status = f"{err}. Add a song first."
            self.open_create()
            return
        try:
            self.library.delete(song["id"])
        except DataAccessError as err:
            logger.error("Error deleting song %d: %s", song["id"], err)
            self.status = str(err)
        else:
            self.status = f"Deleted \"{song['title']}\""
        self.mode = AppMode.BROWSING
        self.refresh_all()

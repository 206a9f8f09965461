"""Map the selected table row to the song it displays."""

import logging

logger = logging.getLogger(__name__)


class EmptySelectionError(LookupError):
    """Raised when no song is displayed at the selected row"""


def resolve(songs, selected_row):
    """Return the song shown at *selected_row* of the current result set

    Args:
        songs: The displayed (possibly filtered) list of song dicts
        selected_row: Zero-based row index

    Returns:
        dict: The selected song

    Raises:
        EmptySelectionError: If the result set is empty or the row is out of range
    """
    if not songs:
        logger.error("No songs in library to select")
        raise EmptySelectionError("No songs in library")
    if not 0 <= selected_row < len(songs):
        logger.error("Selected row %d is outside %d songs", selected_row, len(songs))
        raise EmptySelectionError(f"No song at row {selected_row}")
    return songs[selected_row]

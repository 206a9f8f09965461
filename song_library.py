"""
Song library storage and management using SQLite.

This module stores the song records (title, artist, album, release year and
media type) shown in the library table, and exposes the ``SongLibrary``
handle the TUI talks to.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager

import constants as cv
from db_utils import SONG_COLUMNS
from db_utils import get_connection as _get_connection
from db_utils import row_to_song_dict as _row_to_song_dict
from db_utils import validate_song_id as _validate_song_id

# Constants
DB_PATH = cv.DB_PATH

logger = logging.getLogger(__name__)


def init_database(db_path=DB_PATH):
    """Create the songs table if it doesn't exist"""
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with _get_connection(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS songs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                album TEXT NOT NULL,
                release_year INTEGER NOT NULL,
                media_type TEXT NOT NULL
            )
        """
        )

        # Create indexes for faster queries
        cursor.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_songs_title
            ON songs(title)
        """
        )
        cursor.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_songs_artist
            ON songs(artist)
        """
        )

        conn.commit()

    return db_path


def add_song(song, db_path=DB_PATH):
    """Insert a new song; the id is assigned by the database

    Args:
        song: Song dict (its "id" key, if any, is ignored)
        db_path: Path to database

    Returns:
        int: The id of the new row
    """
    with _get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            """
            INSERT INTO songs (title, artist, album, release_year, media_type)
            VALUES (?, ?, ?, ?, ?)
        """,
            (
                song["title"],
                song["artist"],
                song["album"],
                song["release_year"],
                song["media_type"],
            ),
        )
        conn.commit()
        song_id = cursor.lastrowid

    logger.info("Added song %d: %s", song_id, song["title"])
    return song_id


def get_all_songs(db_path=DB_PATH):
    """Get all songs ordered by id"""
    with _get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {SONG_COLUMNS} FROM songs ORDER BY id")
        return [_row_to_song_dict(row) for row in cursor.fetchall()]


def _like_pattern(keyword):
    escaped = (
        keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return f"%{escaped}%"


def search_songs(keyword, db_path=DB_PATH):
    """Search songs whose title, artist, album, year or media type contains *keyword*

    Matching is a case-insensitive (ASCII) substring match; an empty keyword
    matches every song.
    """
    pattern = _like_pattern(keyword)
    with _get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            f"""
            SELECT {SONG_COLUMNS}
            FROM songs
            WHERE title LIKE ? ESCAPE '\\'
               OR artist LIKE ? ESCAPE '\\'
               OR album LIKE ? ESCAPE '\\'
               OR CAST(release_year AS TEXT) LIKE ? ESCAPE '\\'
               OR media_type LIKE ? ESCAPE '\\'
            ORDER BY id
        """,
            (pattern,) * 5,
        )
        return [_row_to_song_dict(row) for row in cursor.fetchall()]


def update_song(song_id, song, db_path=DB_PATH):
    """Replace every field of a song except its id

    Args:
        song_id: Id of the song to update
        song: Song dict holding the new field values
        db_path: Path to database

    Returns:
        int: Number of rows changed (0 if no song has that id)

    Raises:
        ValueError: If song_id is not a non-negative integer
    """
    _validate_song_id(song_id)

    with _get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(
            """
            UPDATE songs
            SET title = ?, artist = ?, album = ?, release_year = ?, media_type = ?
            WHERE id = ?
        """,
            (
                song["title"],
                song["artist"],
                song["album"],
                song["release_year"],
                song["media_type"],
                song_id,
            ),
        )
        conn.commit()
        changed = cursor.rowcount

    if not changed:
        logger.warning("Update matched no song with id %d", song_id)
    return changed


def delete_song(song_id, db_path=DB_PATH):
    """Delete song by id, returns the number of rows removed"""
    _validate_song_id(song_id)

    with _get_connection(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM songs WHERE id = ?", (song_id,))
        conn.commit()
        removed = cursor.rowcount

    logger.info("Deleted song %d (%d row(s))", song_id, removed)
    return removed


class DataAccessError(Exception):
    """Raised by SongLibrary when a database operation fails"""


@contextmanager
def _data_access(operation):
    try:
        yield
    except (sqlite3.Error, OverflowError, ValueError) as err:
        raise DataAccessError(f"{operation} failed: {err}") from err


class SongLibrary:
    """Persistence handle bound to one database file

    Every method raises DataAccessError instead of the underlying sqlite3
    exception, and for ids rejected by validate_song_id.
    """

    def __init__(self, db_path=DB_PATH):
        self.db_path = db_path

    def open(self):
        """Create the schema if needed"""
        with _data_access("Opening database"):
            init_database(self.db_path)
        return self

    def fetch_all(self):
        with _data_access("Loading songs"):
            return get_all_songs(self.db_path)

    def fetch_matching(self, keyword):
        with _data_access("Searching songs"):
            return search_songs(keyword, self.db_path)

    def insert(self, song):
        with _data_access("Adding song"):
            return add_song(song, self.db_path)

    def update(self, song_id, song):
        with _data_access("Updating song"):
            return update_song(song_id, song, self.db_path)

    def delete(self, song_id):
        with _data_access("Deleting song"):
            return delete_song(song_id, self.db_path)

"""
Shared database utilities for SQLite operations.

This module provides connection management and row conversion helpers used
by the song library persistence layer.
"""

import sqlite3
from contextlib import contextmanager

SONG_COLUMNS = "id, title, artist, album, release_year, media_type"


@contextmanager
def get_connection(db_path):
    """Context manager for database connections with automatic rollback on error

    Args:
        db_path: Path to SQLite database file

    Yields:
        sqlite3.Connection: Database connection

    Note:
        Automatically rolls back transaction on exception and closes connection
    """
    conn = sqlite3.connect(db_path)
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def row_to_song_dict(row):
    """Convert song row to dict with fields: id, title, artist, album, release_year, media_type"""
    return {
        "id": row[0],
        "title": row[1],
        "artist": row[2],
        "album": row[3],
        "release_year": row[4],
        "media_type": row[5],
    }


def validate_song_id(song_id):
    """Validate a song id

    Args:
        song_id: Identifier to check

    Raises:
        ValueError: If the id is not a non-negative integer
    """
    if isinstance(song_id, bool) or not isinstance(song_id, int) or song_id < 0:
        raise ValueError(f"Invalid song id: {song_id!r}")

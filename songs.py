"""
Song record helpers.

Songs travel through the app as plain dicts with the keys
``id, title, artist, album, release_year, media_type``.
"""

import constants as cv


def make_song(song_id, title, artist, album, release_year, media_type):
    """Build a song dict"""
    return {
        "id": song_id,
        "title": title,
        "artist": artist,
        "album": album,
        "release_year": release_year,
        "media_type": media_type,
    }


def song_fields_as_text(song):
    """Return the five editable fields of *song* as display strings, in form order"""
    return [str(song.get(field, "")) for field in cv.SONG_FIELDS]


def load_failure_song():
    """Placeholder shown when the song list cannot be loaded"""
    return make_song(404, "Error", "Displaying", "Songs.", 404, "Error")


def search_failure_song():
    """Placeholder shown when a search query fails"""
    return make_song(500, "Error", "Searching", "Songs.", 500, "Error")


def empty_song():
    """Placeholder used when there is no song to select"""
    return make_song(0, "", "", "", 0, "")

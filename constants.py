import os

VERSION = "0.2.0"
APP_NAME = "music-library"

USER_SPECS_DATA = "user_specs.yaml"
PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
DB_PATH = os.path.join(PROJECT_DIR, "data", "music_library.db")
LOG_PATH = os.path.join(PROJECT_DIR, "data", "music_library.log")
LOG_LEVEL = "INFO"

SONG_FIELDS = ("title", "artist", "album", "release_year", "media_type")
FIELD_LABELS = ("Title", "Artist", "Album", "Year", "Media")
YEAR_FIELD_INDEX = 3

TABLE_HEADERS = ("Title", "Artist", "Album", "Year", "Media Type")
TABLE_COLUMN_PERCENTAGES = (20, 20, 30, 10, 20)
POPUP_WIDTH_PERCENT = 70
POPUP_HEIGHT_PERCENT = 50

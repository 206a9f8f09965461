"""
Terminal front end built on blessed.

``compose_frame`` turns a ``LibraryApp.view_state()`` snapshot into rows of
styled text segments; ``draw`` writes them to the terminal in one call, and
``run`` drives the read-key / handle-key / redraw loop. Keystrokes are
translated into ``keys.Key`` values before they reach the app.
"""

import logging
import sys

from blessed import Terminal

import constants as cv
import keys
from library_app import AppMode

logger = logging.getLogger(__name__)

MIN_WIDTH = 40
MIN_HEIGHT = 12
SELECT_MARK = ">> "
REDRAW_TIMEOUT = 0.5

BROWSE_HINTS = [
    ("Search", "/"),
    ("New Song", "N"),
    ("Edit Song", "E"),
    ("Delete Song", "D"),
    ("Quit", "Q"),
]
SEARCH_HINTS = [("Done", "Enter"), ("Cancel", "ESC")]
FORM_HINTS = [("Cancel", "ESC"), ("Next Field", "Tab"), ("Submit", "Enter")]
DELETE_HINTS = [("Cancel", "ESC"), ("Yes", "Y")]

_NAMED_KEYS = {
    "KEY_ENTER": keys.ENTER,
    "KEY_ESCAPE": keys.ESCAPE,
    "KEY_TAB": keys.TAB,
    "KEY_BACKSPACE": keys.BACKSPACE,
    "KEY_LEFT": keys.LEFT,
    "KEY_RIGHT": keys.RIGHT,
    "KEY_UP": keys.UP,
    "KEY_DOWN": keys.DOWN,
}
_CONTROL_CHARS = {
    "\r": keys.ENTER,
    "\n": keys.ENTER,
    "\t": keys.TAB,
    "\x1b": keys.ESCAPE,
    "\x7f": keys.BACKSPACE,
    "\x08": keys.BACKSPACE,
}


def translate_key(keystroke):
    """Convert a blessed Keystroke into a keys.Key"""
    if keystroke.is_sequence:
        return keys.Key(_NAMED_KEYS.get(keystroke.name, keys.UNKNOWN))
    text = str(keystroke)
    if text in _CONTROL_CHARS:
        return keys.Key(_CONTROL_CHARS[text])
    if len(text) == 1 and text.isprintable():
        return keys.Key.from_char(text)
    return keys.Key(keys.UNKNOWN)


# ----------------------------------------------------------------------
# Text helpers
#
# Widths are terminal columns as measured by blessed, so wide characters
# (CJK, most emoji) count as two.
# ----------------------------------------------------------------------


def _clip(term, text, max_width):
    """Longest prefix of text that fits in max_width columns"""
    kept = []
    used = 0
    for char in text:
        char_width = term.length(char)
        if used + char_width > max_width:
            break
        kept.append(char)
        used += char_width
    return "".join(kept)


def _truncate(term, text, max_width):
    """Truncate text with ellipsis if too wide"""
    if term.length(text) <= max_width:
        return text
    if max_width <= 3:
        return _clip(term, text, max_width)
    return _clip(term, text, max_width - 3) + "..."


def _fit(term, text, width):
    return term.ljust(_truncate(term, text, width), width)


def _segments_text(segments):
    return "".join(text for text, _ in segments)


def _segments_width(term, segments):
    return term.length(_segments_text(segments))


def _slice_segments(term, segments, start, end):
    """Return the part of *segments* covering columns [start, end)

    A wide character cut by either edge is replaced by spaces.
    """
    result = []
    pos = 0
    for text, style in segments:
        kept = []
        for char in text:
            char_width = term.length(char)
            if start <= pos and pos + char_width <= end:
                kept.append(char)
            elif pos < end and pos + char_width > start:
                kept.append(" " * (min(end, pos + char_width) - max(start, pos)))
            pos += char_width
        if kept:
            result.append(("".join(kept), style))
    return result


def _field_window(term, prefix, text, cursor, width):
    """Fit an editing field into *width* columns with the cursor on screen

    Text scrolls left once the cursor would pass the right edge.

    Returns:
        tuple: (line, column) where column is the cursor offset in line
    """
    room = max(width - term.length(prefix), 1)
    start = 0
    while start < cursor and term.length(text[start:cursor]) >= room:
        start += 1
    line = prefix + _clip(term, text[start:], room)
    return line, term.length(prefix) + term.length(text[start:cursor])


def _hint_segments(hints):
    segments = []
    for label, key in hints:
        segments.append((f" {label} ", None))
        segments.append((f"<{key}>", "key"))
    segments.append((" ", None))
    return segments


def _border(term, width, corners, fill, label=None):
    """Horizontal box edge with *label* segments centred in it"""
    left, right = corners
    inner = width - 2
    label = list(label or [])
    if _segments_width(term, label) > inner:
        label = [(_truncate(term, _segments_text(label), inner), None)]
    label_width = _segments_width(term, label)
    pad_left = (inner - label_width) // 2
    pad_right = inner - label_width - pad_left
    return [(left + fill * pad_left, None), *label, (fill * pad_right + right, None)]


def _boxed_line(term, width, text, style=None, side="┃"):
    return [(side, None), (_fit(term, text, width - 2), style), (side, None)]


def _table_columns(inner_width):
    usable = inner_width - len(SELECT_MARK)
    widths = [usable * pct // 100 for pct in cv.TABLE_COLUMN_PERCENTAGES]
    widths[-1] += usable - sum(widths)
    return widths


def _table_line(term, cells, widths):
    return "".join(
        _fit(term, cell, width - 1) + " " for cell, width in zip(cells, widths)
    )


def song_cells(song):
    return [
        song["title"],
        song["artist"],
        song["album"],
        str(song["release_year"]),
        song["media_type"],
    ]


# ----------------------------------------------------------------------
# Frame composition
# ----------------------------------------------------------------------


def _popup_size(width, height):
    popup_width = min(max(width * cv.POPUP_WIDTH_PERCENT // 100, 30), width)
    popup_height = min(max(height * cv.POPUP_HEIGHT_PERCENT // 100, 9), height - 2)
    return popup_width, popup_height


def _pad_popup(term, rows, width, height, hints):
    while len(rows) < height - 1:
        rows.append(_boxed_line(term, width, "", None, "│"))
    rows.append(_border(term, width, "└┘", "─", _hint_segments(hints)))
    return rows


def _form_popup(term, form, width, height):
    """Rows for the create/edit popup, plus the cursor offset inside it"""
    rows = [_border(term, width, "┌┐", "─", [(f" {form['title']} ", "title")])]
    rows.append(_boxed_line(term, width, "", None, "│"))
    cursor = None
    for field in form["fields"]:
        prefix = f" {field['label']}: "
        if field["editing"]:
            line, column = _field_window(
                term, prefix, field["text"], field["cursor"], width - 2
            )
            rows.append(_boxed_line(term, width, line, "editing", "│"))
            cursor = (1 + column, len(rows) - 1)
        else:
            rows.append(_boxed_line(term, width, prefix + field["text"], None, "│"))
    if form["error"]:
        rows.append(_boxed_line(term, width, f" {form['error']}", "warning", "│"))
    return _pad_popup(term, rows, width, height, FORM_HINTS), cursor


def _delete_popup(term, song, width, height):
    rows = [_border(term, width, "┌┐", "─", [(" Delete Song ", "title")])]
    rows.append(_boxed_line(term, width, "", None, "│"))
    message = "Are you sure you want to delete this song?"
    rows.append(
        _boxed_line(term, width, term.center(message, width - 2), "warning", "│")
    )
    if song is not None:
        detail = f"{song['title']} - {song['artist']}"
        rows.append(_boxed_line(term, width, term.center(detail, width - 2), None, "│"))
    return _pad_popup(term, rows, width, height, DELETE_HINTS)


def _overlay(term, rows, popup_rows, x, y):
    for dy, popup_row in enumerate(popup_rows):
        base = rows[y + dy]
        popup_width = _segments_width(term, popup_row)
        total = _segments_width(term, base)
        rows[y + dy] = (
            _slice_segments(term, base, 0, x)
            + popup_row
            + _slice_segments(term, base, x + popup_width, total)
        )


def compose_frame(term, state, width, height):
    """Lay out one screen for *state*

    Args:
        term: blessed Terminal used to measure text in columns
        state: Snapshot from LibraryApp.view_state()
        width: Terminal width in columns
        height: Terminal height in rows

    Returns:
        tuple: (rows, cursor) where rows is a list of ``height`` rows, each a
        list of ``(text, style)`` segments, and cursor is an ``(x, y)`` tuple
        for the text cursor or None when no field is being edited
    """
    if width < MIN_WIDTH or height < MIN_HEIGHT:
        rows = [[(_fit(term, "Terminal too small", width), "warning")]]
        rows += [[(" " * width, None)] for _ in range(height - 1)]
        return rows, None

    rows = []
    cursor = None
    mode = state["mode"]

    # Search bar
    search = state["search"]
    prefix = f" {search['label']}: "
    rows.append(_border(term, width, "┏┓", "━", [(" Music Library ", "title")]))
    if search["editing"]:
        line, column = _field_window(
            term, prefix, search["text"], search["cursor"], width - 2
        )
        rows.append(_boxed_line(term, width, line, "editing"))
        cursor = (1 + column, 1)
    else:
        rows.append(_boxed_line(term, width, prefix + search["text"]))
    rows.append(_border(term, width, "┗┛", "━"))

    # Song table
    table_top = len(rows)
    widths = _table_columns(width - 2)
    rows.append(_border(term, width, "┏┓", "━"))
    header = " " * len(SELECT_MARK) + _table_line(term, cv.TABLE_HEADERS, widths)
    rows.append(_boxed_line(term, width, header, "header"))

    songs = state["songs"]
    selected = state["selected_row"]
    visible = height - table_top - 4
    offset = max(0, selected - visible + 1)
    for index in range(offset, offset + visible):
        if index >= len(songs):
            rows.append(_boxed_line(term, width, ""))
            continue
        is_selected = index == selected
        mark = SELECT_MARK if is_selected else " " * len(SELECT_MARK)
        line = mark + _table_line(term, song_cells(songs[index]), widths)
        rows.append(
            _boxed_line(term, width, line, "selected" if is_selected else None)
        )
    hints = SEARCH_HINTS if mode is AppMode.SEARCHING else BROWSE_HINTS
    rows.append(_border(term, width, "┗┛", "━", _hint_segments(hints)))

    # Status line (one column short so the terminal does not scroll)
    status = state["status"] or ""
    rows.append([(_fit(term, status, width - 1), "status" if status else None)])

    # Popups
    popup_width, popup_height = _popup_size(width, height)
    x = (width - popup_width) // 2
    y = (height - popup_height) // 2
    if mode in (AppMode.CREATING, AppMode.EDITING):
        form = state["create_form"] if mode is AppMode.CREATING else state["edit_form"]
        popup_rows, popup_cursor = _form_popup(term, form, popup_width, popup_height)
        _overlay(term, rows, popup_rows, x, y)
        cursor = None
        if popup_cursor is not None:
            cursor = (x + popup_cursor[0], y + popup_cursor[1])
    elif mode is AppMode.CONFIRMING_DELETE:
        song = songs[selected] if 0 <= selected < len(songs) else None
        _overlay(term, rows, _delete_popup(term, song, popup_width, popup_height), x, y)
        cursor = None

    return rows, cursor


# ----------------------------------------------------------------------
# Terminal I/O
# ----------------------------------------------------------------------


def _styled(term, text, style):
    if not style:
        return text
    formatters = {
        "title": term.bold,
        "header": term.bold,
        "selected": term.reverse,
        "editing": term.bold_yellow,
        "key": term.bold_yellow,
        "warning": term.bold_red,
        "status": term.cyan,
    }
    return formatters[style](text)


def render(term, state):
    """Return the escape-sequence string that draws *state* on *term*"""
    rows, cursor = compose_frame(term, state, term.width, term.height)
    buf = [term.home]
    for y, segments in enumerate(rows):
        buf.append(term.move_xy(0, y))
        buf.extend(_styled(term, text, style) for text, style in segments)
    if cursor is None:
        buf.append(term.hide_cursor)
    else:
        buf.append(term.move_xy(*cursor) + term.normal_cursor)
    return "".join(buf)


def draw(term, state, stream=None):
    """Write the entire frame to the terminal in one call"""
    stream = stream or sys.stdout
    stream.write(render(term, state))
    stream.flush()


def run(app, term=None):
    """Drive *app* until it reaches AppMode.EXITING

    The screen is redrawn after every keystroke and every REDRAW_TIMEOUT
    seconds so that terminal resizes are picked up.
    """
    term = term or Terminal()
    app.load()
    logger.info("Starting TUI with %d song(s)", len(app.songs))
    with term.fullscreen(), term.cbreak():
        try:
            while app.is_running:
                draw(term, app.view_state())
                keystroke = term.inkey(timeout=REDRAW_TIMEOUT)
                if not keystroke:
                    continue
                app.handle_key(translate_key(keystroke))
        finally:
            sys.stdout.write(term.normal_cursor)
            sys.stdout.flush()
    logger.info("TUI closed")

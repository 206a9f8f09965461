"""
Music Library - terminal music library manager

Main entry point for the application. Parses the command line, opens the
song database and launches the interactive TUI.
"""

import logging
import sys

import yaml

import constants as cv
import log_setup
import reader
import tui
from library_app import LibraryApp
from song_library import DataAccessError, SongLibrary

logger = logging.getLogger(__name__)

USAGE = f"""
Usage: {cv.APP_NAME} [OPTIONS]

Options:
  <NONE>          Run music library
  -v, --version   Print version information
  -h, --help      Print help (you are here)
"""


class ArgumentError(ValueError):
    """Raised for command lines the program does not accept"""


def parse_args(args):
    """Decide what to do from the command line arguments (without argv[0])

    Returns:
        str: "run", "help" or "version"

    Raises:
        ArgumentError: For unknown options or more than one argument
    """
    if not args:
        return "run"
    if len(args) > 1:
        raise ArgumentError(
            'Error: Invalid number of arguments. Use "-h" or "--help" for usage information.'
        )
    if args[0] in ("-h", "--help"):
        return "help"
    if args[0] in ("-v", "--version"):
        return "version"
    raise ArgumentError(
        'Error: Invalid argument. Use "-h" or "--help" for usage information.'
    )


def print_help():
    print(USAGE)


def print_version():
    print(f"{cv.APP_NAME} v{cv.VERSION}")


def launch():
    """Load configuration, open the database and run the TUI

    Returns:
        int: Process exit code
    """
    try:
        user_specs = reader.load_user_specs()
    except (yaml.YAMLError, ValueError) as err:
        print(f"Error: invalid {cv.USER_SPECS_DATA}: {err}", file=sys.stderr)
        return 1
    log_setup.configure_logging(
        reader.get_log_path(user_specs), reader.get_log_level(user_specs)
    )

    db_path = reader.get_database_path(user_specs)
    try:
        library = SongLibrary(db_path).open()
    except (DataAccessError, OSError) as err:
        logger.critical("Cannot open database %s: %s", db_path, err)
        print(f"Error: cannot open database {db_path}: {err}", file=sys.stderr)
        return 1

    logger.info("Opened database %s", db_path)
    try:
        tui.run(LibraryApp(library))
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    try:
        action = parse_args(args)
    except ArgumentError as err:
        print(err, file=sys.stderr)
        return 2

    if action == "help":
        print_help()
        return 0
    if action == "version":
        print_version()
        return 0
    return launch()


if __name__ == "__main__":
    sys.exit(main())

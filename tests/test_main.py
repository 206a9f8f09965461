"""Tests for main module - command line handling and startup"""

from unittest.mock import patch

import pytest

import constants as cv
import main


@pytest.mark.parametrize(
    "args, action",
    [
        ([], "run"),
        (["-h"], "help"),
        (["--help"], "help"),
        (["-v"], "version"),
        (["--version"], "version"),
    ],
)
def test_parse_args(args, action):
    assert main.parse_args(args) == action


@pytest.mark.parametrize("args", [["-x"], ["songs"], ["-h", "-v"], ["-v", "extra"]])
def test_parse_args_rejects(args):
    with pytest.raises(main.ArgumentError):
        main.parse_args(args)


def test_parse_args_messages():
    with pytest.raises(main.ArgumentError, match="Invalid argument"):
        main.parse_args(["--bogus"])
    with pytest.raises(main.ArgumentError, match="Invalid number of arguments"):
        main.parse_args(["a", "b"])


def test_help_exits_zero(capsys):
    assert main.main(["--help"]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_version_exits_zero(capsys):
    assert main.main(["-v"]) == 0
    assert cv.VERSION in capsys.readouterr().out


def test_bad_argument_exits_with_error(capsys):
    assert main.main(["--bogus"]) == 2
    assert "Invalid argument" in capsys.readouterr().err


@pytest.fixture
def isolated_specs(tmp_path):
    """Point configuration at a temporary directory and keep logging untouched"""
    specs = {
        "database": str(tmp_path / "library.db"),
        "log_file": str(tmp_path / "library.log"),
    }
    with patch.object(main.reader, "load_user_specs", return_value=specs), patch.object(
        main.log_setup, "configure_logging"
    ) as configure:
        yield specs, configure


def test_launch_runs_tui(isolated_specs):
    specs, configure = isolated_specs
    with patch.object(main.tui, "run") as run:
        assert main.main([]) == 0

    configure.assert_called_once_with(specs["log_file"], "INFO")
    app = run.call_args[0][0]
    assert app.library.db_path == specs["database"]


def test_launch_database_failure(isolated_specs, tmp_path, capsys):
    specs, _ = isolated_specs
    specs["database"] = str(tmp_path)  # a directory cannot be opened as a database
    with patch.object(main.tui, "run") as run:
        assert main.main([]) == 1
    run.assert_not_called()
    assert "cannot open database" in capsys.readouterr().err


def test_launch_invalid_specs(capsys):
    with patch.object(main.reader, "load_user_specs", side_effect=ValueError("bad")):
        assert main.main([]) == 1
    assert "invalid" in capsys.readouterr().err


def test_keyboard_interrupt_exits_cleanly(isolated_specs):
    with patch.object(main.tui, "run", side_effect=KeyboardInterrupt):
        assert main.main([]) == 0

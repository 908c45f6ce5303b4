# tests/test_cli.py
from pathlib import Path

import pytest

from cmdprofile.__main__ import main
from cmdprofile.cli.cli import config_overrides, parse_args
from cmdprofile.consts.ExitCode import ExitCode
from cmdprofile.exceptions import UsageError


def test_command_and_options():
    args = parse_args(["--interval", "0.5", "--log-file", "out/run.log", "--no-gpu", "make", "-j8"])

    assert args.command == ["make", "-j8"]
    assert args.interval == 0.5
    assert config_overrides(args) == {
        "interval": 0.5,
        "baseline": None,
        "log_file": Path("out/run.log"),
        "gpu_enabled": False,
    }


def test_leading_double_dash_is_dropped():
    assert parse_args(["--", "ls", "-l"]).command == ["ls", "-l"]
    assert parse_args(["--interval", "0.5", "--", "--weird-name", "x"]).command == ["--weird-name", "x"]

    with pytest.raises(UsageError, match="missing command"):
        parse_args(["--"])


def test_options_after_command_belong_to_command():
    args = parse_args(["python3", "train.py", "--interval", "3", "-h"])

    assert args.command == ["python3", "train.py", "--interval", "3", "-h"]
    assert args.interval is None
    assert not args.help


def test_unset_options_do_not_override_config():
    overrides = config_overrides(parse_args(["true"]))

    assert all(v is None for v in overrides.values())


@pytest.mark.parametrize("argv", [[], ["-h"], ["--help"], ["--interval", "0.5"], ["--interval", "soon", "true"]])
def test_usage_errors(argv):
    with pytest.raises(UsageError):
        parse_args(argv)


def test_main_help_exits_with_usage_code(capsys):
    assert main(["--help"]) == ExitCode.USAGE

    err = capsys.readouterr().err
    assert "usage: cmdprofile [options] <command> [arguments...]" in err
    assert "--interval" in err


def test_main_without_command_is_usage_error(capsys):
    assert main([]) == ExitCode.USAGE

    assert "missing command" in capsys.readouterr().err


def test_main_bad_config_is_setup_error(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cmdprofile.yaml").write_text("interval: 0.001\n")

    assert main(["true"]) == ExitCode.SETUP_ERROR
    assert "interval must be at least" in capsys.readouterr().err
    assert not (tmp_path / "cmdprofile.log").exists()


def test_exit_code_from_returncode():
    assert ExitCode.from_returncode(0) == 0
    assert ExitCode.from_returncode(7) == 7
    assert ExitCode.from_returncode(-9) == 137

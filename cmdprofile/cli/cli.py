#!/usr/bin/env python3
"""
Command-line interface for cmdprofile.
"""
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from cmdprofile.exceptions import UsageError

PROG = "cmdprofile"


class ProfilerArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> ProfilerArgumentParser:
    """
    Create the cmdprofile ArgumentParser.

    The automatic --help action is replaced by a plain flag so that asking
    for help exits with the usage code like any other usage error.

    Returns:
        ProfilerArgumentParser: parser for `cmdprofile [options] <command> [arguments...]`
    """
    parser = ProfilerArgumentParser(
        prog=PROG,
        usage=f"{PROG} [options] <command> [arguments...]",
        description="Run a command while sampling system CPU, memory and GPU usage.",
        epilog="""Examples:
  cmdprofile python3 train.py --epochs 3
  cmdprofile --interval 0.5 --log-file logs/build.log make -j8
  cmdprofile --env ci ./run_tests.sh

Samples and the command's output are appended to the log file; a summary
with min/max/range/avg per metric is printed when the command finishes.""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true",
                        help="Show this help message and exit")
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML config file (default: ./cmdprofile.yaml if present)")
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help=(
            "Environment name for configuration override (e.g., 'dev', 'ci'). "
            "Loads cmdprofile_<env>.yaml in addition to the base config file."
        ),
    )
    parser.add_argument("--interval", type=float, default=None,
                        help="Sampling interval in seconds (default: 0.25)")
    parser.add_argument("--baseline", type=float, default=None,
                        help="Seconds of baseline sampling before the command starts (default: 1.0)")
    parser.add_argument("--log-file", type=Path, default=None,
                        help="Run log, opened in append mode (default: ./cmdprofile.log)")
    parser.add_argument("--no-gpu", action="store_true",
                        help="Do not query nvidia-smi even if it is installed")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print diagnostic debug output")
    parser.add_argument("command", nargs=argparse.REMAINDER,
                        help="Command to run (e.g., python3 script.py args...)")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse cmdprofile arguments.

    Raises:
        UsageError: On help requests, unknown options or a missing command
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command[:1] == ["--"]:
        args.command = args.command[1:]
    if args.help:
        raise UsageError("")
    if not args.command:
        raise UsageError("missing command")
    return args


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Config values given on the command line; unset options map to None."""
    return {
        "interval": args.interval,
        "baseline": args.baseline,
        "log_file": args.log_file,
        "gpu_enabled": False if args.no_gpu else None,
    }

#!/usr/bin/env python3
"""
Run a command and profile system resource usage while it runs.

Usage:
    cmdprofile [options] <command> [arguments...]
    python3 -m cmdprofile python3 your_prog.py arg1 arg2 ...
"""
import logging
import sys
from typing import List, Optional

from cmdprofile.cli.cli import build_parser, config_overrides, parse_args
from cmdprofile.config.config_loader import ConfigLoader
from cmdprofile.consts.ExitCode import ExitCode
from cmdprofile.exceptions import ChildExecutionError, SetupError, UsageError
from cmdprofile.service.profiler.profile_session import ProfileSession
from cmdprofile.util.log_config import set_diagnostic_level


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except UsageError as e:
        parser = build_parser()
        if str(e):
            print(f"[cmdprofile] {e}", file=sys.stderr)
            parser.print_usage(sys.stderr)
        else:
            parser.print_help(sys.stderr)
        return ExitCode.USAGE

    if args.verbose:
        set_diagnostic_level(logging.DEBUG)

    try:
        config = ConfigLoader(args.config, env=args.env, overrides=config_overrides(args)).config_data
        return ProfileSession(args.command, config).run()
    except (SetupError, ChildExecutionError) as e:
        print(f"[cmdprofile] {e}", file=sys.stderr)
        return ExitCode.SETUP_ERROR
    except KeyboardInterrupt:
        print("[cmdprofile] Interrupted", file=sys.stderr)
        return ExitCode.INTERRUPTED


def main_entry() -> None:
    sys.exit(int(main()))


if __name__ == "__main__":
    main_entry()

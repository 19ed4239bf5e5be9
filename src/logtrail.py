#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from bootstrap import bootstrap_base_env, bootstrap_run_context


def _dispatch_help(parser: argparse.ArgumentParser, argv: list[str]) -> int:
    # Support:
    #   logtrail help
    #   logtrail help logs
    #   logtrail logs help
    if argv and argv[0] == "help":
        argv = argv[1:]

    if not argv:
        parser.print_help()
        return 0

    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="logtrail")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug console output")
    p.add_argument("-q", "--quiet", action="store_true", help="No console logging")
    p.add_argument(
        "--log-retention",
        help="Retention window for logtrail's own log files (overrides LOG_RETENTION)",
    )
    p.add_argument(
        "--log-anchor",
        choices=("trailing", "fixed"),
        help="Anchoring for logtrail's own log files (overrides LOG_RETENTION_ANCHOR)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from cli.cli_env import build_env_parser
    from cli.cli_logs import build_logs_parser

    build_env_parser(sub)
    build_logs_parser(sub)

    return p


def main(argv: list[str] | None = None) -> int:
    bootstrap_base_env(required=False)

    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)

    # Unified help routing
    if getattr(args, "_help", False) or (unknown and unknown[-1] == "help"):
        return _dispatch_help(parser, argv)
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")

    bootstrap_run_context(
        command=args.command,
        verbose=args.verbose,
        quiet=args.quiet,
        retention=args.log_retention,
        anchor=args.log_anchor,
    )

    # Initialize logging AFTER run-context env stamping
    from logger import init_logging, get_logger
    from env import ConfigError
    from retention import ConfigurationError

    try:
        init_logging()
    except (ConfigurationError, ConfigError) as e:
        print(f"logtrail: invalid log retention settings: {e}", file=sys.stderr)
        return 2

    log = get_logger(__name__)
    log.debug(f"Command: {args.command}")

    if args.command == "env":
        from cli.cli_env import handle_env

        return handle_env(args)

    if args.command == "logs":
        from cli.cli_logs import handle_logs

        return handle_logs(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())

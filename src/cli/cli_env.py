from __future__ import annotations

import argparse

from env import get_env
from retention import ConfigurationError, build_anchor, format_duration, parse_duration, rollover_pattern
from cli.common import RENDER, dispatch_subparser_help, print_table


def build_env_parser(subparsers: argparse._SubParsersAction) -> None:
    env = subparsers.add_parser("env", help="Environment utilities")
    sub = env.add_subparsers(dest="env_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for env")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=env)

    dump_p = sub.add_parser("dump", help="Show resolved runtime environment")
    dump_p.set_defaults(action="dump")

    check_p = sub.add_parser("check", help="Validate retention settings")
    check_p.set_defaults(action="check")


def handle_env(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "dump":
        return handle_env_dump()

    if args.action == "check":
        return handle_env_check()

    raise SystemExit(f"Unknown env action: {args.action}")


def handle_env_dump() -> int:
    data = get_env().as_dict()

    rows = [
        [section, key, str(value)]
        for section, values in data.items()
        for key, value in values.items()
    ]
    print_table(["Section", "Key", "Value"], rows, title="Runtime Environment")
    return 0


def handle_env_check() -> int:
    le = get_env().logging

    try:
        window = parse_duration(le.log_retention)
        pattern = None if le.size_rotation else rollover_pattern(le.rotate_when)
        anchor = build_anchor(le.log_retention_anchor, window=window, pattern=pattern)
        granularity = anchor.granularity()
    except ConfigurationError as e:
        RENDER.print(f"[red]Invalid retention settings:[/red] {e}", highlight=False)
        return 2

    RENDER.print(
        f"window={format_duration(window)} anchor={anchor.name} "
        f"granularity={granularity.value} check_interval={granularity.interval}",
        highlight=False,
    )
    return 0

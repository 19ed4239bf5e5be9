from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from env import get_env
from retention import (
    ANCHORS,
    ConfigurationError,
    FileRetentionSweeper,
    RetentionScheduler,
    SweepError,
    build_anchor,
    format_duration,
    parse_duration,
    rollover_pattern,
)
from cli.common import (
    RENDER,
    dispatch_subparser_help,
    format_mtime,
    list_log_files,
    print_table,
    resolve_log_file,
)


def build_logs_parser(subparsers: argparse._SubParsersAction) -> None:
    logs = subparsers.add_parser("logs", help="Log utilities")
    lsub = logs.add_subparsers(dest="logs_cmd", required=True)

    help_p = lsub.add_parser("help", help="Show help for logs")
    help_p.add_argument("path", nargs="*", help="Subcommand path (e.g. list, sweep)")
    help_p.set_defaults(action="help", _help_parser=logs)

    list_p = lsub.add_parser("list", help="List a log file and its rotated siblings")
    _add_target_args(list_p)
    list_p.set_defaults(action="list")

    sweep_p = lsub.add_parser("sweep", help="Delete log files outside the retention window")
    _add_target_args(sweep_p)
    sweep_p.add_argument("--retention", help="Retention window (e.g. 7d, 00:05:00, PT1H)")
    sweep_p.add_argument("--anchor", choices=ANCHORS, help="Window anchoring")
    sweep_p.add_argument(
        "--dry-run", action="store_true", help="Only list files that would be deleted"
    )
    sweep_p.set_defaults(action="sweep")


def _add_target_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--target",
        default="bootstrap",
        help="Command whose logs to use (logs/<target>/<target>.log)",
    )
    p.add_argument("--file", help="Explicit log file path")


def handle_logs(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    log_file = resolve_log_file(command=args.target, explicit=getattr(args, "file", None))

    if args.action == "list":
        return handle_logs_list(log_file)

    if args.action == "sweep":
        return handle_logs_sweep(
            log_file,
            retention=args.retention,
            anchor=args.anchor,
            dry_run=bool(args.dry_run),
        )

    raise SystemExit(f"Unknown logs action: {args.action}")


def handle_logs_list(log_file: Path) -> int:
    if not log_file.parent.exists():
        RENDER.print("No logs directory found")
        return 0

    rows = [
        [f.path.name, format_mtime(f.mtime), str(f.size)]
        for f in list_log_files(log_file)
    ]
    print_table(["File", "Modified", "Bytes"], rows)
    return 0


def handle_logs_sweep(
    log_file: Path,
    *,
    retention: str | None,
    anchor: str | None,
    dry_run: bool,
) -> int:
    le = get_env().logging

    try:
        window = parse_duration(retention or le.log_retention)
        pattern = None if le.size_rotation else rollover_pattern(le.rotate_when)
        strategy = build_anchor(
            anchor or le.log_retention_anchor, window=window, pattern=pattern
        )
    except ConfigurationError as e:
        RENDER.print(f"[red]Invalid retention settings:[/red] {e}", highlight=False)
        return 2

    if not log_file.parent.exists():
        RENDER.print("No logs directory found")
        return 0

    sweeper = FileRetentionSweeper(log_file, window, strategy.normalize)
    header = f"{log_file.name}: window={format_duration(window)} anchor={strategy.name}"

    if dry_run:
        try:
            strategy.granularity()
            now = datetime.now()
            expired = sweeper.expired(now)
        except (ConfigurationError, SweepError) as e:
            RENDER.print(f"[red]{e}[/red]", highlight=False)
            return 2 if isinstance(e, ConfigurationError) else 1

        RENDER.print(f"{header} cutoff={format_mtime(sweeper.cutoff(now))}", highlight=False)
        print_table(["Would delete"], [[p.name] for p in expired])
        return 0

    scheduler = RetentionScheduler(strategy, sweeper.sweep)
    try:
        result = scheduler.activate()
    except ConfigurationError as e:
        RENDER.print(f"[red]Invalid retention settings:[/red] {e}", highlight=False)
        return 2
    except SweepError as e:
        for path, err in e.failures:
            RENDER.print(f"[red]failed[/red] {path}: {err}", highlight=False)
        result = e.result
        if result is None:
            return 1
        _print_deleted(header, result.cutoff, result.deleted)
        return 1

    _print_deleted(header, result.cutoff, result.deleted)
    return 0


def _print_deleted(header: str, cutoff: datetime, deleted: list[Path]) -> None:
    RENDER.print(f"{header} cutoff={format_mtime(cutoff)}", highlight=False)
    print_table(["Deleted"], [[p.name] for p in deleted])

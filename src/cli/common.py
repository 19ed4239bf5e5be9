from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable

from rich.console import Console
from rich.table import Table

from env import LOGS_DIR
from retention import candidate_files

RENDER = Console(soft_wrap=True)


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Logs filesystem helpers
# ----------------------------


def resolve_log_file(*, command: str, explicit: str | None) -> Path:
    if explicit:
        return Path(explicit).expanduser().resolve()
    return (LOGS_DIR / command / f"{command}.log").resolve()


def iter_log_files(log_file: Path) -> Iterable[Path]:
    # Same selection a retention sweep uses.
    if not log_file.parent.exists():
        return []
    return candidate_files(log_file)


@dataclass(frozen=True)
class LogFile:
    path: Path
    mtime: float
    size: int


def list_log_files(log_file: Path) -> list[LogFile]:
    items: list[LogFile] = []
    for p in iter_log_files(log_file):
        try:
            st = p.stat()
        except OSError:
            continue
        items.append(LogFile(path=p, mtime=st.st_mtime, size=st.st_size))

    items.sort(key=lambda f: f.mtime, reverse=True)
    return items


def format_mtime(ts: float | datetime) -> str:
    if not isinstance(ts, datetime):
        ts = datetime.fromtimestamp(ts)
    return ts.strftime("%Y-%m-%d %H:%M:%S")


# ----------------------------
# CLI output helpers
# ----------------------------


def print_table(headers: list[str], rows: list[list[str]], title: str | None = None) -> None:
    if not rows:
        RENDER.print("(no results)")
        return

    table = Table(title=title, show_edge=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(c) for c in row))

    RENDER.print(table)

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

# Console used by RichHandler (stdout so subprocess-forwarding works)
LOG_CONSOLE = Console(
    file=sys.stdout,
    soft_wrap=True,
)


def build_console_handler(level: int = logging.INFO) -> logging.Handler:
    handler = RichHandler(
        console=LOG_CONSOLE,
        level=level,
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    # RichHandler renders the level column; the formatter must not repeat it.
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler

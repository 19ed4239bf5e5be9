"""bootstrap.py

Process bootstrap for logtrail.

Rules:
1) Only bootstrap is allowed to *mutate* os.environ for shared run context.
2) Call bootstrap_base_env() once at the true entrypoint.
3) Call bootstrap_run_context() after argparse parsing, before init_logging().

Everything else treats environment variables as the source of truth.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from env import CONFIG_DIR, reset_env_caches


_BOOTSTRAPPED = False


def bootstrap_base_env(*, env_file: str = ".env", required: bool = False) -> None:
    global _BOOTSTRAPPED
    if _BOOTSTRAPPED:
        return

    dotenv_path = CONFIG_DIR / env_file

    if dotenv_path.exists():
        # Never overrides variables already set by the caller.
        load_dotenv(dotenv_path, override=False)
    elif required:
        raise RuntimeError(
            f"Missing required env file: {dotenv_path}\n"
            "Expected config/.env relative to project root."
        )

    reset_env_caches()
    _BOOTSTRAPPED = True


def bootstrap_run_context(
    *,
    command: str,
    verbose: bool | None = None,
    quiet: bool | None = None,
    retention: str | None = None,
    anchor: str | None = None,
) -> None:
    """Establish run-scoped context used by logging."""

    os.environ["LOGTRAIL_COMMAND"] = command

    if verbose is not None:
        os.environ["LOGTRAIL_VERBOSE"] = "1" if verbose else "0"
    if quiet is not None:
        os.environ["LOGTRAIL_QUIET"] = "1" if quiet else "0"

    if retention:
        os.environ["LOG_RETENTION"] = retention
    if anchor:
        os.environ["LOG_RETENTION_ANCHOR"] = anchor

    # Context changes must invalidate cached env views.
    reset_env_caches()

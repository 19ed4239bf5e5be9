import argparse
import os
import subprocess
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parent.parent / "src"


def _run(*args, env_extra=None):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    env.update(env_extra or {})
    return subprocess.run(
        [sys.executable, "-m", "logtrail", *args],
        capture_output=True,
        text=True,
        env=env,
    )


def _aged(path, **delta):
    path.write_text("x")
    ts = (datetime.now() - timedelta(**delta)).timestamp()
    os.utime(path, (ts, ts))
    return path


def test_logs_help_runs():
    result = _run("logs", "--help")
    assert result.returncode == 0


def test_env_help_runs():
    result = _run("help", "env")
    assert result.returncode == 0


def test_bad_retention_exits_with_config_error(tmp_path):
    result = _run("env", "dump", env_extra={"LOG_RETENTION": "soon"})
    assert result.returncode == 2
    assert "retention" in result.stderr


def test_env_check_reports_interval(capsys):
    from logtrail import main

    assert main(["env", "check"]) == 0
    out = capsys.readouterr().out
    assert "granularity=day" in out


def test_sweep_dry_run_deletes_nothing(tmp_path, capsys):
    from logtrail import main

    old = _aged(tmp_path / "app.log.1", hours=3)
    fresh = _aged(tmp_path / "app.log.2", minutes=1)

    rc = main(
        [
            "logs",
            "sweep",
            "--file",
            str(tmp_path / "app.log"),
            "--retention",
            "01:00:00",
            "--dry-run",
        ]
    )

    assert rc == 0
    assert old.exists()
    assert fresh.exists()
    assert "app.log.1" in capsys.readouterr().out


def test_sweep_deletes_expired(tmp_path, capsys):
    from logtrail import main

    old = _aged(tmp_path / "app.log.1", hours=3)
    fresh = _aged(tmp_path / "app.log.2", minutes=1)

    rc = main(["logs", "sweep", "--file", str(tmp_path / "app.log"), "--retention", "1h"])

    # "1h" has no day marker and is not a structured literal
    assert rc == 2
    assert old.exists()

    rc = main(["logs", "sweep", "--file", str(tmp_path / "app.log"), "--retention", "PT1H"])

    assert rc == 0
    assert not old.exists()
    assert fresh.exists()
    assert "app.log.1" in capsys.readouterr().out


def test_logs_list(tmp_path, capsys):
    from logtrail import main

    _aged(tmp_path / "app.log", minutes=0)
    _aged(tmp_path / "app.log.1", minutes=5)

    assert main(["logs", "list", "--file", str(tmp_path / "app.log")]) == 0
    out = capsys.readouterr().out
    assert "app.log.1" in out


def test_list_and_sweep_select_the_same_files(tmp_path):
    from cli.common import iter_log_files
    from retention import FileRetentionSweeper

    _aged(tmp_path / "app.log", minutes=0)
    _aged(tmp_path / "app.log.1", minutes=5)
    _aged(tmp_path / "other.log", minutes=5)
    (tmp_path / "app.log.d").mkdir()

    log_file = tmp_path / "app.log"
    sweeper = FileRetentionSweeper(log_file, timedelta(days=1), lambda t: t)

    assert list(iter_log_files(log_file)) == sweeper.candidates()
    assert [p.name for p in sweeper.candidates()] == ["app.log", "app.log.1"]


def test_unknown_action_exits():
    from cli.cli_env import handle_env
    from cli.cli_logs import handle_logs

    with pytest.raises(SystemExit):
        handle_env(argparse.Namespace(action="bogus"))
    with pytest.raises(SystemExit):
        handle_logs(argparse.Namespace(action="bogus", target="x", file=None))

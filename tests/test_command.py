import logging

import pytest

from nexpanel_installer.errors import CommandFailed, CommandTimeout
from nexpanel_installer.lib.command import have_command, run_cmd


def test_captures_output():
    r = run_cmd(["sh", "-c", "echo hello"])
    assert r.ok
    assert r.stdout.strip() == "hello"


def test_nonzero_exit_raises_command_failed():
    with pytest.raises(CommandFailed) as exc:
        run_cmd(["sh", "-c", "echo nope >&2; exit 3"])
    assert exc.value.returncode == 3
    assert "nope" in exc.value.stderr


def test_nonzero_exit_without_check():
    r = run_cmd(["false"], check=False)
    assert r.returncode != 0
    assert not r.ok


def test_timeout_raises_command_timeout(caplog):
    caplog.set_level(logging.INFO)
    with pytest.raises(CommandTimeout) as exc:
        run_cmd(["sleep", "5"], timeout=0.2)
    assert exc.value.timeout == pytest.approx(0.2)
    assert "TIMEOUT" in caplog.text


def test_dry_run_does_not_execute(tmp_path):
    marker = tmp_path / "marker"
    r = run_cmd(["touch", str(marker)], dry_run=True)
    assert r.ok
    assert not marker.exists()


def test_secrets_are_redacted_from_log(caplog):
    caplog.set_level(logging.DEBUG)
    run_cmd(["sh", "-c", "echo s3cret-value"], redact=["s3cret-value"])
    assert "s3cret-value" not in caplog.text
    assert "******" in caplog.text


def test_redacted_failure_message():
    with pytest.raises(CommandFailed) as exc:
        run_cmd(["sh", "-c", "exit 1", "hunter2"], redact=["hunter2"])
    assert "hunter2" not in str(exc.value)


def test_have_command():
    assert have_command("sh")
    assert not have_command("definitely-not-a-real-command-xyz")

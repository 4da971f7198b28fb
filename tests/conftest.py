from __future__ import annotations

import logging

import pytest

from nexpanel_installer.config import InstallerConfig
from nexpanel_installer.context import RunContext


class RecordingStep:
    def __init__(self, step_id, calls, *, fail=None, label=None, action=None):
        self.step_id = step_id
        self.label = label or step_id
        self.calls = calls
        self.fail = fail
        self.action = action

    def run(self, ctx):
        self.calls.append(self.step_id)
        if self.action is not None:
            self.action(ctx)
        if self.fail is not None:
            raise self.fail


def make_steps(ids, calls, failures=None):
    failures = failures or {}
    return [RecordingStep(i, calls, fail=failures.get(i)) for i in ids]


@pytest.fixture
def cfg(tmp_path):
    return InstallerConfig(
        raw={
            "panel": {"dir": str(tmp_path / "opt" / "nexpanel")},
            "paths": {
                "backup_root": str(tmp_path / "backups"),
                "web_root": str(tmp_path / "www"),
                "secrets_file": str(tmp_path / "root" / ".nexpanel-install-secrets"),
                "credentials_file": str(tmp_path / "root" / "nexpanel-credentials.txt"),
                "service_unit": str(tmp_path / "systemd" / "nexpanel.service"),
                "mariadb_tuning": str(tmp_path / "mysql" / "99-nexpanel.cnf"),
                "nginx_tuning": str(tmp_path / "nginx" / "tuning.conf"),
            },
        }
    )


@pytest.fixture
def ctx(cfg, tmp_path):
    return RunContext(cfg=cfg, log_path=str(tmp_path / "install.log"))


@pytest.fixture
def dry_ctx(cfg, tmp_path):
    return RunContext(cfg=cfg, dry_run=True, log_path=str(tmp_path / "install.log"))


@pytest.fixture
def state_path(tmp_path):
    return str(tmp_path / "state" / "install-state")


@pytest.fixture
def reset_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
    for attr in ("_nexpanel_configured", "_nexpanel_log_path"):
        if hasattr(root, attr):
            delattr(root, attr)
    root.setLevel(level)

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .command import run_cmd

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)

SERVICE_TIMEOUT = 90.0


def is_active(name: str, *, timeout: float = SERVICE_TIMEOUT, dry_run: bool = False) -> bool:
    r = run_cmd(["systemctl", "is-active", "--quiet", name], check=False, timeout=timeout, dry_run=dry_run)
    return r.returncode == 0


def daemon_reload(*, timeout: float = SERVICE_TIMEOUT, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "daemon-reload"], timeout=timeout, dry_run=dry_run)


def enable(name: str, *, timeout: float = SERVICE_TIMEOUT, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "enable", name], timeout=timeout, dry_run=dry_run)


def restart(name: str, *, timeout: float = SERVICE_TIMEOUT, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "restart", name], timeout=timeout, dry_run=dry_run)


def stop(name: str, *, timeout: float = SERVICE_TIMEOUT, dry_run: bool = False) -> None:
    run_cmd(["systemctl", "stop", name], timeout=timeout, dry_run=dry_run)


def enable_and_start(ctx: "RunContext", name: str) -> None:
    """Enable and start a unit, recording it so rollback can stop it again."""

    timeout = ctx.cfg.timeout("service")
    enable(name, timeout=timeout, dry_run=ctx.dry_run)
    run_cmd(["systemctl", "start", name], timeout=timeout, dry_run=ctx.dry_run)
    ctx.record_service_started(name)
    logger.info("Service %s enabled and started", name)

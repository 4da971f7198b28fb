from __future__ import annotations

import logging

from ..errors import InstallerError
from .command import run_cmd

logger = logging.getLogger(__name__)

UNKNOWN_IP = "YOUR_SERVER_IP"


def is_online(host: str = "8.8.8.8", *, dry_run: bool = False) -> bool:
    """Best-effort online check."""

    try:
        r = run_cmd(["ping", "-c", "1", "-W", "2", host], check=False, timeout=10, dry_run=dry_run)
        return r.returncode == 0
    except (InstallerError, OSError):
        return False


def public_ip(*, timeout: float = 10, dry_run: bool = False) -> str:
    """Ask ifconfig.me for our public address; fall back to a placeholder."""

    if dry_run:
        return UNKNOWN_IP
    try:
        r = run_cmd(["curl", "-s", "--max-time", str(int(timeout)), "ifconfig.me"], check=False, timeout=timeout + 5)
    except (InstallerError, OSError):
        return UNKNOWN_IP
    ip = r.stdout.strip()
    return ip if r.returncode == 0 and ip else UNKNOWN_IP

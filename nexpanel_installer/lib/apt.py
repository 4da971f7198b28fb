from __future__ import annotations

import logging
from typing import Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)

NONINTERACTIVE_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, timeout: float, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "update", "-qq"], timeout=timeout, env=NONINTERACTIVE_ENV, dry_run=dry_run)


def apt_upgrade(*, timeout: float, dry_run: bool = False) -> None:
    run_cmd(["apt-get", "upgrade", "-y", "-qq"], timeout=timeout, env=NONINTERACTIVE_ENV, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, timeout: float, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(
        ["apt-get", "install", "-y", "-qq", *packages],
        timeout=timeout,
        env=NONINTERACTIVE_ENV,
        dry_run=dry_run,
    )


def is_installed(package: str, *, dry_run: bool = False) -> bool:
    """Return True if dpkg reports ``package`` as installed."""

    if dry_run:
        return False
    r = run_cmd(["dpkg-query", "-W", "-f=${Status}", package], check=False, timeout=30)
    return r.returncode == 0 and r.stdout.strip().endswith("install ok installed")


def install_missing(packages: Sequence[str], *, timeout: float, dry_run: bool = False) -> list[str]:
    """Install the packages dpkg does not already know about; return those installed."""

    missing = []
    for package in packages:
        if is_installed(package, dry_run=dry_run):
            logger.info("%s already installed", package)
        else:
            missing.append(package)
    for package in missing:
        logger.info("Installing %s...", package)
        apt_install([package], timeout=timeout, dry_run=dry_run)
    return missing


def add_apt_repository(repo: str, *, timeout: float, dry_run: bool = False) -> None:
    run_cmd(["add-apt-repository", "-y", repo], timeout=timeout, env=NONINTERACTIVE_ENV, dry_run=dry_run)

from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.apt import apt_update, apt_upgrade
from ..ui import run_in_background

logger = logging.getLogger(__name__)


class UpdateSystemStep:
    step_id = "10_update_system"
    label = "Updating System Packages"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg

        run_in_background(
            lambda: apt_update(timeout=cfg.timeout("apt_update"), dry_run=ctx.dry_run),
            "Updating package lists",
        )
        logger.info("Package lists updated")

        run_in_background(
            lambda: apt_upgrade(timeout=cfg.timeout("apt_upgrade"), dry_run=ctx.dry_run),
            "Upgrading packages (this may take a while)",
        )
        logger.info("System packages upgraded")

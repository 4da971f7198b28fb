from __future__ import annotations

import logging

from ..context import RunContext
from ..lib import systemd
from ..lib.apt import apt_install

logger = logging.getLogger(__name__)


class NginxStep:
    step_id = "20_nginx"
    label = "Installing Nginx Web Server"

    def run(self, ctx: RunContext) -> None:
        if systemd.is_active("nginx", timeout=ctx.cfg.timeout("service"), dry_run=ctx.dry_run):
            logger.info("Nginx already running")
            return

        apt_install(["nginx"], timeout=ctx.cfg.timeout("apt_install"), dry_run=ctx.dry_run)
        systemd.enable_and_start(ctx, "nginx")
        logger.info("Nginx installed and started")

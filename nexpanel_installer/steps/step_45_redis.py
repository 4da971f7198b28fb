from __future__ import annotations

import logging

from ..context import RunContext
from ..lib import systemd
from ..lib.apt import apt_install, install_missing

logger = logging.getLogger(__name__)


class RedisStep:
    step_id = "45_redis"
    label = "Installing Redis Cache Server"

    def run(self, ctx: RunContext) -> None:
        timeout = ctx.cfg.timeout("apt_install")

        if systemd.is_active("redis-server", timeout=ctx.cfg.timeout("service"), dry_run=ctx.dry_run):
            logger.info("Redis already running")
        else:
            apt_install(["redis-server"], timeout=timeout, dry_run=ctx.dry_run)
            systemd.enable_and_start(ctx, "redis-server")
            logger.info("Redis installed and started")

        logger.info("Installing VSFTPD...")
        install_missing(["vsftpd"], timeout=timeout, dry_run=ctx.dry_run)
        logger.info("VSFTPD installed")

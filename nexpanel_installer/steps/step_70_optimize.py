from __future__ import annotations

import logging

from ..context import RunContext
from ..lib import systemd
from ..lib.command import run_cmd
from ..templates import MARIADB_TUNING, NGINX_TUNING

logger = logging.getLogger(__name__)


class OptimizeStep:
    step_id = "70_optimize"
    label = "Applying System Optimizations"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg

        logger.info("Optimizing MariaDB for 2-4GB RAM...")
        ctx.write_file(cfg.mariadb_tuning_path, MARIADB_TUNING)
        systemd.restart("mariadb", timeout=cfg.timeout("service"), dry_run=ctx.dry_run)
        logger.info("MariaDB optimized")

        logger.info("Optimizing Nginx...")
        ctx.write_file(cfg.nginx_tuning_path, NGINX_TUNING)
        run_cmd(["nginx", "-t"], timeout=cfg.timeout("service"), dry_run=ctx.dry_run)
        systemd.restart("nginx", timeout=cfg.timeout("service"), dry_run=ctx.dry_run)
        logger.info("Nginx optimized")

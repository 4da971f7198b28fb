from __future__ import annotations

import logging

from ..context import RunContext
from ..lib import systemd
from ..lib.command import have_command

logger = logging.getLogger(__name__)


class HealthChecksStep:
    step_id = "80_health_checks"
    label = "Running Health Checks"

    def run(self, ctx: RunContext) -> None:
        # Problems are reported, never fatal.
        for service in ctx.cfg.health_services:
            ok = systemd.is_active(service, timeout=ctx.cfg.timeout("service"), dry_run=ctx.dry_run)
            ctx.health[service] = ok
            if ok:
                logger.info("%s is running", service)
            else:
                logger.warning("%s is not running", service)

        for command in ["node", "npm"]:
            ok = have_command(command, dry_run=ctx.dry_run)
            ctx.health[command] = ok
            if ok:
                logger.info("%s is installed", command)
            else:
                logger.warning("%s is not installed", command)

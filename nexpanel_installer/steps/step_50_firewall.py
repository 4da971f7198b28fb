from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.command import run_cmd

logger = logging.getLogger(__name__)


class FirewallStep:
    step_id = "50_firewall"
    label = "Configuring Firewall (UFW)"

    def run(self, ctx: RunContext) -> None:
        timeout = ctx.cfg.timeout("service")
        rules = ctx.cfg.firewall_rules

        # Rules go in before enabling so SSH is never cut off.
        for rule in rules:
            argv = ["ufw", "allow", rule.port_spec]
            if rule.comment:
                argv += ["comment", rule.comment]
            run_cmd(argv, timeout=timeout, dry_run=ctx.dry_run)

        run_cmd(["ufw", "--force", "enable"], timeout=timeout, dry_run=ctx.dry_run)
        run_cmd(["ufw", "reload"], timeout=timeout, dry_run=ctx.dry_run)

        logger.info("Firewall configured")
        logger.info(
            "Allowed ports: %s",
            ", ".join(f"{r.port} ({r.comment})" if r.comment else str(r.port) for r in rules),
        )

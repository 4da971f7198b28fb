from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.apt import install_missing

logger = logging.getLogger(__name__)


class CorePackagesStep:
    step_id = "15_core_packages"
    label = "Installing Core Dependencies"

    def run(self, ctx: RunContext) -> None:
        installed = install_missing(
            ctx.cfg.core_packages,
            timeout=ctx.cfg.timeout("apt_install"),
            dry_run=ctx.dry_run,
        )
        logger.info("Core dependencies ready (%d newly installed)", len(installed))

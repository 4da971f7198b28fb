from __future__ import annotations

import logging

from ..context import RunContext
from ..lib import systemd
from ..lib.apt import add_apt_repository, apt_install, apt_update

logger = logging.getLogger(__name__)


class PhpStep:
    step_id = "30_php"
    label = "Installing PHP-FPM (Multiple Versions)"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg

        logger.info("Adding PHP repository %s...", cfg.php_ppa)
        add_apt_repository(cfg.php_ppa, timeout=cfg.timeout("download"), dry_run=ctx.dry_run)
        apt_update(timeout=cfg.timeout("apt_update"), dry_run=ctx.dry_run)

        for version in cfg.php_versions:
            logger.info("Installing PHP %s...", version)
            packages = [f"php{version}-{ext}" for ext in cfg.php_extensions]
            apt_install(packages, timeout=cfg.timeout("apt_install"), dry_run=ctx.dry_run)
            service = f"php{version}-fpm"
            if not systemd.is_active(service, timeout=ctx.cfg.timeout("service"), dry_run=ctx.dry_run):
                systemd.enable_and_start(ctx, service)
            logger.info("PHP %s installed", version)

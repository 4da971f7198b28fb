from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.apt import install_missing
from ..lib.command import run_cmd

logger = logging.getLogger(__name__)


class PythonStep:
    step_id = "40_python"
    label = "Installing Python 3 and Tools"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        timeout = cfg.timeout("apt_install")

        install_missing(cfg.python_packages, timeout=timeout, dry_run=ctx.dry_run)

        logger.info("Upgrading pip...")
        run_cmd(["pip3", "install", "--upgrade", "pip"], timeout=timeout, dry_run=ctx.dry_run)
        if cfg.pip_packages:
            run_cmd(["pip3", "install", *cfg.pip_packages], timeout=timeout, dry_run=ctx.dry_run)
        logger.info("Python tools installed")

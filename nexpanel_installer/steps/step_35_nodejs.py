from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..context import RunContext
from ..errors import StepError
from ..lib.apt import apt_install
from ..lib.command import have_command, run_cmd

logger = logging.getLogger(__name__)

NODESOURCE_URL = "https://deb.nodesource.com/setup_{major}.x"


class NodeJsStep:
    step_id = "35_nodejs"
    label = "Installing Node.js LTS"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg

        if have_command("node", dry_run=ctx.dry_run):
            version = run_cmd(["node", "-v"], check=False, timeout=30, dry_run=ctx.dry_run).stdout.strip()
            logger.info("Node.js already installed: %s", version or "unknown version")
        else:
            self._install_node(ctx)

        if have_command("pm2", dry_run=ctx.dry_run):
            logger.info("PM2 already installed")
        else:
            logger.info("Installing PM2 process manager...")
            run_cmd(["npm", "install", "-g", "pm2"], timeout=cfg.timeout("apt_install"), dry_run=ctx.dry_run)
        run_cmd(["pm2", "startup", "systemd", "-u", "root", "--hp", "/root"], timeout=cfg.timeout("service"), dry_run=ctx.dry_run)
        run_cmd(["pm2", "save"], timeout=cfg.timeout("service"), dry_run=ctx.dry_run)
        logger.info("PM2 installed")

    def _install_node(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        url = NODESOURCE_URL.format(major=cfg.node_major)

        with tempfile.TemporaryDirectory(prefix="nodesource-") as tmp:
            script = str(Path(tmp) / "setup.sh")
            logger.info("Downloading Node.js setup script...")
            run_cmd(["curl", "-fsSL", url, "-o", script], timeout=cfg.timeout("download"), dry_run=ctx.dry_run)
            run_cmd(["bash", script], timeout=cfg.timeout("apt_install"), dry_run=ctx.dry_run)

        logger.info("Installing Node.js...")
        apt_install(["nodejs"], timeout=cfg.timeout("apt_install"), dry_run=ctx.dry_run)
        if not have_command("node", dry_run=ctx.dry_run):
            raise StepError("nodejs package installed but `node` is not on PATH")
        version = run_cmd(["node", "-v"], check=False, timeout=30, dry_run=ctx.dry_run).stdout.strip()
        logger.info("Node.js %s installed", version)

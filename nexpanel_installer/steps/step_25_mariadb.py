from __future__ import annotations

import logging
from typing import Optional

from ..context import RunContext
from ..lib import systemd
from ..lib.apt import apt_install
from ..lib.command import CmdResult, run_cmd
from ..lib.credentials import ensure_secret

logger = logging.getLogger(__name__)


def _mysql(ctx: RunContext, sql: str, *, password: Optional[str], secrets: list[str], check: bool = True) -> CmdResult:
    # The password goes through MYSQL_PWD so it never shows up in argv.
    return run_cmd(
        ["mysql", "-u", "root", "-e", sql],
        env={"MYSQL_PWD": password} if password else None,
        redact=secrets,
        check=check,
        timeout=ctx.cfg.timeout("service"),
        dry_run=ctx.dry_run,
    )


class MariaDBStep:
    step_id = "25_mariadb"
    label = "Installing MariaDB Database"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg

        if systemd.is_active("mariadb", timeout=ctx.cfg.timeout("service"), dry_run=ctx.dry_run):
            logger.info("MariaDB already running")
        else:
            logger.info("Installing MariaDB...")
            apt_install(["mariadb-server", "mariadb-client"], timeout=cfg.timeout("apt_install"), dry_run=ctx.dry_run)
            systemd.enable_and_start(ctx, "mariadb")
            logger.info("MariaDB installed and started")

        root_pw = ensure_secret(ctx, "DB_ROOT_PASSWORD")
        panel_pw = ensure_secret(ctx, "DB_PASSWORD")
        hidden = [root_pw, panel_pw]

        logger.info("Securing MariaDB installation...")
        # Best-effort: these fail harmlessly when a previous run already applied them.
        _mysql(ctx, f"ALTER USER 'root'@'localhost' IDENTIFIED BY '{root_pw}';", password=None, secrets=hidden, check=False)
        _mysql(ctx, "DELETE FROM mysql.user WHERE User='';", password=root_pw, secrets=hidden, check=False)
        _mysql(ctx, "DROP DATABASE IF EXISTS test;", password=root_pw, secrets=hidden, check=False)
        _mysql(ctx, "FLUSH PRIVILEGES;", password=root_pw, secrets=hidden, check=False)
        logger.info("MariaDB secured")

        logger.info("Creating %s database...", cfg.db_name)
        for sql in [
            f"CREATE DATABASE IF NOT EXISTS `{cfg.db_name}`;",
            f"CREATE USER IF NOT EXISTS '{cfg.db_user}'@'localhost' IDENTIFIED BY '{panel_pw}';",
            f"ALTER USER '{cfg.db_user}'@'localhost' IDENTIFIED BY '{panel_pw}';",
            f"GRANT ALL PRIVILEGES ON `{cfg.db_name}`.* TO '{cfg.db_user}'@'localhost';",
            "FLUSH PRIVILEGES;",
        ]:
            _mysql(ctx, sql, password=root_pw, secrets=hidden)
        logger.info("Database '%s' created", cfg.db_name)

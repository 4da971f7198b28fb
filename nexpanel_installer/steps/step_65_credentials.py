from __future__ import annotations

import logging

from ..context import RunContext
from ..lib.credentials import ensure_secret
from ..lib.net import public_ip
from ..templates import credentials

logger = logging.getLogger(__name__)


class CredentialsStep:
    step_id = "65_credentials"
    label = "Generating Admin Credentials"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        text = credentials(
            cfg,
            server_ip=public_ip(timeout=cfg.timeout("download"), dry_run=ctx.dry_run),
            admin_password=ensure_secret(ctx, "ADMIN_PASSWORD", nbytes=16),
            db_root_password=ensure_secret(ctx, "DB_ROOT_PASSWORD"),
        )
        ctx.write_file(cfg.credentials_file, text, mode=0o600)
        logger.info("Credentials saved to %s", cfg.credentials_file)

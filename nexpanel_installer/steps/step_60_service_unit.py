from __future__ import annotations

import logging

from ..context import RunContext
from ..lib import systemd
from ..lib.credentials import ensure_secret
from ..templates import service_unit

logger = logging.getLogger(__name__)


class ServiceUnitStep:
    step_id = "60_service_unit"
    label = "Creating Systemd Service"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        db_password = ensure_secret(ctx, "DB_PASSWORD")

        ctx.write_file(cfg.service_unit_path, service_unit(cfg, db_password=db_password), mode=0o600)
        systemd.daemon_reload(timeout=cfg.timeout("service"), dry_run=ctx.dry_run)
        logger.info("Systemd service created: %s", cfg.service_unit_path)

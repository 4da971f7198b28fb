from __future__ import annotations

import logging
from pathlib import Path

from ..context import RunContext
from ..templates import package_json

logger = logging.getLogger(__name__)


class PanelAppStep:
    step_id = "55_panel_app"
    label = "Installing Panel Application"

    def run(self, ctx: RunContext) -> None:
        cfg = ctx.cfg
        panel_dir = Path(cfg.panel_dir)

        for d in [panel_dir, panel_dir / "data", Path(cfg.web_root)]:
            if ctx.dry_run:
                logger.info("Would create directory %s", d)
            else:
                d.mkdir(parents=True, exist_ok=True)

        ctx.write_file(str(panel_dir / "package.json"), package_json(cfg))
        logger.info("%s directories created", cfg.panel_title)

from __future__ import annotations

import enum
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .context import RunContext
from .errors import InstallerError
from .lib import systemd
from .state_store import clear_state

logger = logging.getLogger(__name__)


class RollbackDecision(str, enum.Enum):
    KEEP = "keep"
    REVERT = "revert"


@dataclass
class RollbackReport:
    decision: RollbackDecision
    stopped_services: List[str] = field(default_factory=list)
    restored: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.errors


def rollback(ctx: RunContext, decision: RollbackDecision, *, state_path: str) -> RollbackReport:
    """Keep or revert the mutations recorded in ``ctx``.

    Revert is best-effort: a failure on one item is logged and reported and
    the rest still run. Items that were handled are dropped from ``ctx`` so
    a second revert does nothing.
    """

    report = RollbackReport(decision=decision)

    if decision is RollbackDecision.KEEP:
        logger.warning("Keeping partial installation. You can resume later.")
        logger.info("State saved to: %s", state_path)
        if ctx.backups:
            logger.info("Backups saved to: %s", ctx.backup_dir)
        return report

    logger.info("Rolling back changes...")

    for name in reversed(list(ctx.services_started)):
        try:
            systemd.stop(name, timeout=ctx.cfg.timeout("service"), dry_run=ctx.dry_run)
        except (InstallerError, OSError) as e:
            logger.error("Could not stop %s: %s", name, e)
            report.errors.append((name, str(e)))
            continue
        ctx.services_started.remove(name)
        report.stopped_services.append(name)

    for backup in list(ctx.backups):
        try:
            shutil.copy2(backup.saved, backup.original)
            Path(backup.saved).unlink()
        except OSError as e:
            logger.error("Could not restore %s: %s", backup.original, e)
            report.errors.append((backup.original, str(e)))
            continue
        ctx.backups.remove(backup)
        report.restored.append(backup.original)
        logger.info("Restored: %s", backup.original)

    for path in list(ctx.created_files):
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.error("Could not remove %s: %s", path, e)
            report.errors.append((path, str(e)))
            continue
        ctx.created_files.remove(path)
        report.removed.append(path)
        logger.info("Removed: %s", path)

    try:
        clear_state(state_path)
    except OSError as e:
        logger.error("Could not remove state file %s: %s", state_path, e)
        report.errors.append((state_path, str(e)))

    backup_dir = ctx.backup_dir
    try:
        if backup_dir.is_dir() and not any(backup_dir.iterdir()):
            backup_dir.rmdir()
    except OSError as e:
        logger.error("Could not remove backup directory %s: %s", backup_dir, e)
        report.errors.append((str(backup_dir), str(e)))

    if report.clean:
        logger.warning("Rollback complete. System restored to pre-installation state.")
    else:
        logger.warning("Rollback finished with %d error(s); see the log for details", len(report.errors))
    return report

"""Per-invocation record of host mutations.

One RunContext is created by the CLI and passed to every step. It owns the
backup directory and the lists that rollback walks: files backed up before
an overwrite, files newly created, and services started.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from .config import InstallerConfig

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


@dataclass(frozen=True)
class FileBackup:
    original: str
    saved: str
    timestamp: float


@dataclass
class RunContext:
    cfg: InstallerConfig = field(default_factory=InstallerConfig)
    dry_run: bool = False
    log_path: str = ""
    backup_root: Optional[str] = None
    started_at: float = field(default_factory=time.time)

    backups: List[FileBackup] = field(default_factory=list)
    created_files: List[str] = field(default_factory=list)
    services_started: List[str] = field(default_factory=list)
    secrets: Dict[str, str] = field(default_factory=dict)
    health: Dict[str, bool] = field(default_factory=dict)

    @property
    def backup_dir(self) -> Path:
        root = self.backup_root or self.cfg.backup_root
        return Path(root) / f"{self.cfg.panel_name}-backup-{int(self.started_at)}"

    def _backup_target(self, original: Path) -> Path:
        d = self.backup_dir
        candidate = d / f"{original.name}{BACKUP_SUFFIX}"
        n = 1
        while candidate.exists():
            candidate = d / f"{original.name}.{n}{BACKUP_SUFFIX}"
            n += 1
        return candidate

    def backup_for(self, path: str) -> Optional[FileBackup]:
        for b in self.backups:
            if b.original == path:
                return b
        return None

    @contextmanager
    def backup_before_overwrite(self, path: str) -> Iterator[Optional[FileBackup]]:
        """Save a copy of ``path`` before the block overwrites it.

        Yields the FileBackup, or None when ``path`` does not exist yet (in
        which case nothing is recorded). The copy is taken before the block
        runs, so it survives a failure inside the block.
        """

        p = Path(path)
        existing = self.backup_for(str(p))
        if existing is not None:
            yield existing
            return
        if not p.is_file() or str(p) in self.created_files:
            yield None
            return

        if self.dry_run:
            logger.info("Would back up %s", p)
            yield None
            return

        target = self._backup_target(p)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(p, target)
        backup = FileBackup(original=str(p), saved=str(target), timestamp=time.time())
        self.backups.append(backup)
        logger.info("Backed up %s -> %s", p, target)
        yield backup

    def record_created(self, path: str) -> None:
        p = str(Path(path))
        if p in self.created_files:
            return
        self.created_files.append(p)
        logger.debug("Recorded created file %s", p)

    def record_service_started(self, name: str) -> None:
        if name not in self.services_started:
            self.services_started.append(name)

    def write_file(self, path: str, contents: str, *, mode: Optional[int] = None) -> None:
        p = Path(path)
        if self.dry_run:
            logger.info("Would write %s", p)
            return

        with self.backup_before_overwrite(str(p)) as backup:
            if backup is None and not p.exists():
                # before the write, so a partial write is tracked too
                self.record_created(str(p))
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(contents, encoding="utf-8")
            if mode is not None:
                os.chmod(p, mode)

        logger.info("Wrote %s", p)

"""Pre-installation host checks.

Everything here is read-only: a failure is reported before the runner
mutates anything, so no rollback is involved.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config import InstallerConfig
from ..errors import PreconditionError
from .net import is_online

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class HostFacts:
    os_id: str
    os_version: str
    ram_mb: int
    disk_free_gb: int
    online: bool


def is_root() -> bool:
    return os.geteuid() == 0


def _read_text(path: Path) -> Optional[str]:
    try:
        txt = path.read_text(encoding="utf-8", errors="ignore").strip()
        return txt or None
    except OSError:
        return None


def parse_os_release(text: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        out[key.strip()] = value.strip().strip('"').strip("'")
    return out


def read_os_release(path: str = "/etc/os-release") -> Dict[str, str]:
    txt = _read_text(Path(path))
    if txt is None:
        raise PreconditionError("Cannot detect OS (missing /etc/os-release)")
    return parse_os_release(txt)


def total_ram_mb(meminfo_path: str = "/proc/meminfo") -> int:
    txt = _read_text(Path(meminfo_path)) or ""
    for line in txt.splitlines():
        if line.startswith("MemTotal:"):
            # "MemTotal:  2031616 kB"
            return int(line.split()[1]) // 1024
    raise PreconditionError("Cannot determine total RAM")


def free_disk_gb(path: str = "/") -> int:
    return shutil.disk_usage(path).free // (1024**3)


def gather_facts(cfg: InstallerConfig, *, os_release_path: str = "/etc/os-release") -> HostFacts:
    rel = read_os_release(os_release_path)
    return HostFacts(
        os_id=rel.get("ID", ""),
        os_version=rel.get("VERSION_ID", ""),
        ram_mb=total_ram_mb(),
        disk_free_gb=free_disk_gb("/"),
        online=is_online(cfg.connectivity_host),
    )


def check_host(cfg: InstallerConfig, facts: HostFacts, *, confirm: Confirm) -> None:
    """Raise PreconditionError unless the host can take the install.

    ``confirm`` is asked whether to continue on an untested OS version; it
    is expected to return False when nobody can answer.
    """

    if facts.os_id != cfg.supported_os:
        raise PreconditionError(
            f"This installer only supports {cfg.supported_os.capitalize()} (detected OS: {facts.os_id or 'unknown'})"
        )
    logger.info("OS: %s %s", facts.os_id, facts.os_version)

    if facts.os_version not in cfg.supported_versions:
        logger.warning(
            "This installer is tested on %s %s; you are running %s",
            cfg.supported_os,
            "/".join(cfg.supported_versions),
            facts.os_version,
        )
        if not confirm("Continue anyway?"):
            raise PreconditionError(f"Unsupported {cfg.supported_os} version {facts.os_version}")

    if facts.ram_mb < cfg.min_ram_mb:
        raise PreconditionError(f"Minimum {cfg.min_ram_mb}MB RAM required (found {facts.ram_mb}MB)")
    logger.info("RAM: %sMB", facts.ram_mb)

    if facts.disk_free_gb < cfg.min_disk_gb:
        raise PreconditionError(
            f"Minimum {cfg.min_disk_gb}GB free disk space required (found {facts.disk_free_gb}GB)"
        )
    logger.info("Disk: %sGB available", facts.disk_free_gb)

    if not facts.online:
        raise PreconditionError("No internet connection detected")
    logger.info("Internet connection active")

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def load_state(path: str) -> int:
    """Return the last completed step ordinal, or 0 if there is no prior run."""

    p = Path(path)
    if not p.exists():
        return 0

    text = p.read_text(encoding="utf-8").strip()
    try:
        ordinal = int(text)
    except ValueError as e:
        raise ValueError(f"State file {path} must contain a single integer, got {text!r}") from e

    if ordinal < 0:
        raise ValueError(f"State file {path} holds a negative step ordinal: {ordinal}")
    return ordinal


def save_state(path: str, ordinal: int) -> None:
    """Persist the last completed ordinal atomically (temp file + rename)."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp = tempfile.mkstemp(prefix=f".{p.name}.", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(f"{int(ordinal)}\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, p)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    logger.debug("Saved state %s=%d", path, ordinal)


def clear_state(path: str) -> bool:
    p = Path(path)
    if not p.exists():
        return False
    p.unlink()
    logger.info("Removed state file %s", path)
    return True

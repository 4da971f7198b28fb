from __future__ import annotations

import base64
import logging
import os
import secrets
from pathlib import Path
from typing import TYPE_CHECKING, Dict

if TYPE_CHECKING:
    from ..context import RunContext

logger = logging.getLogger(__name__)


def generate_password(nbytes: int = 32) -> str:
    """Same shape as ``openssl rand -base64 N``."""

    return base64.b64encode(secrets.token_bytes(nbytes)).decode("ascii")


def load_secrets(path: str) -> Dict[str, str]:
    p = Path(path)
    if not p.exists():
        return {}
    out: Dict[str, str] = {}
    for line in p.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip():
            out[key.strip()] = value
    return out


def _dump_secrets(values: Dict[str, str]) -> str:
    return "".join(f"{k}={v}\n" for k, v in sorted(values.items()))


def ensure_secret(ctx: "RunContext", key: str, *, nbytes: int = 32) -> str:
    """Return the generated secret ``key``, creating and persisting it once.

    Secrets live in a root-only file so a resumed run reuses the values an
    earlier invocation already applied to the host.
    """

    if key in ctx.secrets:
        return ctx.secrets[key]

    path = ctx.cfg.secrets_file
    stored = load_secrets(path)
    ctx.secrets.update({k: v for k, v in stored.items() if k not in ctx.secrets})
    if key in ctx.secrets:
        logger.info("Reusing stored secret %s", key)
        return ctx.secrets[key]

    ctx.secrets[key] = generate_password(nbytes)
    _write_secrets(path, {**stored, **ctx.secrets}, dry_run=ctx.dry_run)
    return ctx.secrets[key]


def _write_secrets(path: str, values: Dict[str, str], *, dry_run: bool) -> None:
    """Persist secrets outside the rollback record.

    Passwords already applied to the host (the MariaDB root password) are not
    undone by a revert, so the file has to outlive it.
    """

    p = Path(path)
    if dry_run:
        logger.info("Would write %s", p)
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(p, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(_dump_secrets(values))
    os.chmod(p, 0o600)
    logger.info("Wrote %s", p)

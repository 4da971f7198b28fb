from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import CommandFailed, CommandTimeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300.0


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _redact(text: str, secrets: Sequence[str]) -> str:
    for s in secrets:
        if s:
            text = text.replace(s, "******")
    return text


def _fmt_argv(argv: Sequence[str], secrets: Sequence[str] = ()) -> str:
    return _redact(" ".join(shlex.quote(a) for a in argv), secrets)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    timeout: float | None = DEFAULT_TIMEOUT,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    redact: Sequence[str] = (),
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command; stdout/stderr go to the action log at DEBUG.
    - Values in ``redact`` are masked wherever they would be logged.
    - A timeout raises CommandTimeout; a non-zero exit raises CommandFailed
      when ``check`` is set.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list, redact))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.error("TIMEOUT after %ss: %s", timeout, _fmt_argv(argv_list, redact))
        raise CommandTimeout([_redact(a, redact) for a in argv_list], float(timeout or 0)) from e

    if p.stdout:
        logger.debug("STDOUT %s", _redact(p.stdout.strip(), redact))
    if p.stderr:
        logger.debug("STDERR %s", _redact(p.stderr.strip(), redact))

    if check and p.returncode != 0:
        raise CommandFailed(
            [_redact(a, redact) for a in argv_list],
            p.returncode,
            _redact(p.stderr or "", redact),
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def have_command(name: str, *, dry_run: bool = False) -> bool:
    """Return True if ``name`` resolves on PATH (via ``command -v``)."""

    r = run_cmd(["sh", "-c", f"command -v {shlex.quote(name)}"], check=False, timeout=10, dry_run=dry_run)
    return r.returncode == 0

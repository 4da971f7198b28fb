from __future__ import annotations

from typing import Sequence


class InstallerError(RuntimeError):
    """Base class for installer failures."""


class PreconditionError(InstallerError):
    """Host is not fit for installation. Raised before any mutation."""


class StepError(InstallerError):
    pass


class CommandFailed(InstallerError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        detail = f"\n{stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"Command failed ({returncode}): {' '.join(self.argv)}{detail}")


class CommandTimeout(InstallerError):
    """A command exceeded its time budget (hung, as opposed to rejected)."""

    def __init__(self, argv: Sequence[str], timeout: float) -> None:
        self.argv = list(argv)
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s: {' '.join(self.argv)}")

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_PATH = "/var/log/nexpanel-install.log"

console = Console()


def _open_file_handler(path: str) -> logging.Handler:
    Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure the action log.

    Everything (including command stdout/stderr at DEBUG) goes to the log
    file; the console only shows ``level`` and above.

    If ``log_path`` is not writable we fall back to the temp directory and
    keep going. Returns the actual file path being used.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(root, "_nexpanel_configured", False):
        return getattr(root, "_nexpanel_log_path", log_path)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    chosen_path = log_path
    try:
        file_handler = _open_file_handler(log_path)
    except OSError:
        chosen_path = str(Path(tempfile.gettempdir()) / Path(log_path).name)
        file_handler = _open_file_handler(chosen_path)

    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG)
    root.addHandler(file_handler)

    if also_console:
        rich_handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
        rich_handler.setLevel(level)
        root.addHandler(rich_handler)

    setattr(root, "_nexpanel_configured", True)
    setattr(root, "_nexpanel_log_path", chosen_path)

    logger = logging.getLogger(__name__)
    if chosen_path != log_path:
        logger.warning("Log path %s not writable; using temporary log file %s", log_path, chosen_path)
    logger.info("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path

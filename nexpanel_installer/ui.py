from __future__ import annotations

import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

from rich.console import Console
from rich.prompt import Confirm
from rich.rule import Rule

from .logging_utils import console as default_console

logger = logging.getLogger(__name__)

T = TypeVar("T")


def stdin_is_interactive() -> bool:
    try:
        return sys.stdin.isatty()
    except (AttributeError, ValueError):
        return False


def confirm(question: str, *, default: bool = False, interactive: bool = True, console: Optional[Console] = None) -> bool:
    """Yes/no prompt. Without an operator the (safe) default is returned."""

    if not interactive:
        logger.info("%s [non-interactive: %s]", question, "yes" if default else "no")
        return default
    answer = Confirm.ask(f"[yellow]{question}[/yellow]", default=default, console=console or default_console)
    logger.info("%s -> %s", question, "yes" if answer else "no")
    return answer


def run_in_background(
    fn: Callable[[], T],
    description: str,
    *,
    console: Optional[Console] = None,
) -> T:
    """Run ``fn`` in a worker thread behind a spinner and wait for it.

    The caller blocks until ``fn`` finishes; exceptions are re-raised here.
    """

    con = console or default_console
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="installer-bg") as pool:
        future = pool.submit(fn)
        with con.status(f"{description}..."):
            return future.result()


def step_header(ordinal: int, total: int, label: str, *, console: Optional[Console] = None) -> None:
    con = console or default_console
    pct = ordinal * 100 // total if total else 100
    con.print(Rule(f"[bold cyan][{ordinal}/{total}][/bold cyan] [bold green]{label}[/bold green] [dim]({pct}%)[/dim]"))

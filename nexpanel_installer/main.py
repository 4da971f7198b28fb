from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import InstallerConfig, load_config
from .context import RunContext
from .errors import PreconditionError
from .lib.hostcheck import check_host, gather_facts, is_root
from .logging_utils import configure_logging, console
from .pipeline import RunResult, StepFailure, run_pipeline
from .rollback import RollbackDecision, rollback
from .state_store import load_state
from .steps import (
    CorePackagesStep,
    CredentialsStep,
    FirewallStep,
    HealthChecksStep,
    MariaDBStep,
    NginxStep,
    NodeJsStep,
    OptimizeStep,
    PanelAppStep,
    PhpStep,
    PythonStep,
    RedisStep,
    ServiceUnitStep,
    UpdateSystemStep,
)
from .ui import confirm, stdin_is_interactive, step_header

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PRECONDITION = 1
EXIT_STEP_FAILED = 2
EXIT_INTERRUPTED = 130


def build_steps():
    return [
        UpdateSystemStep(),
        CorePackagesStep(),
        NginxStep(),
        MariaDBStep(),
        PhpStep(),
        NodeJsStep(),
        PythonStep(),
        RedisStep(),
        FirewallStep(),
        PanelAppStep(),
        ServiceUnitStep(),
        CredentialsStep(),
        OptimizeStep(),
        HealthChecksStep(),
    ]


def decide_rollback(on_failure: str, *, interactive: bool) -> RollbackDecision:
    if on_failure == "revert":
        return RollbackDecision.REVERT
    if on_failure == "keep":
        return RollbackDecision.KEEP
    if confirm("Do you want to rollback changes?", default=False, interactive=interactive):
        return RollbackDecision.REVERT
    return RollbackDecision.KEEP


def report_failure(failure: StepFailure) -> None:
    console.print(f"[bold red]✗ Installation failed:[/bold red] {failure.describe()}")
    console.print(f"[blue]ℹ[/blue] Check the log file: {failure.log_path}")


def report_success(cfg: InstallerConfig, ctx: RunContext) -> None:
    console.rule("[bold green]INSTALLATION COMPLETE[/bold green]")
    if ctx.health and all(ctx.health.values()):
        console.print("[green]✓ All services are running properly[/green]")
    else:
        console.print("[yellow]⚠ Some services may need attention[/yellow]")

    creds = Path(cfg.credentials_file)
    if creds.exists():
        console.rule("Your credentials")
        console.print(creds.read_text(encoding="utf-8"), markup=False, highlight=False)

    console.rule("Next steps")
    console.print(f"1. Copy the panel source code to [cyan]{cfg.panel_dir}[/cyan]")
    console.print(f"2. Run: cd {cfg.panel_dir} && npm install")
    console.print(f"3. Start the panel: systemctl start {cfg.service_name}")
    console.print(f"4. Access at http://YOUR_SERVER_IP:{cfg.panel_port}")
    console.print(f"[dim]Installation log: {ctx.log_path}[/dim]")
    console.print(f"[dim]Credentials file: {cfg.credentials_file}[/dim]")


def run(
    *,
    cfg: InstallerConfig,
    state_path: str,
    log_path: str,
    fresh: bool = False,
    interactive: bool = True,
    on_failure: str = "ask",
    dry_run: bool = False,
    skip_host_checks: bool = False,
) -> int:
    """Run the installer end to end; returns the process exit code."""

    actual_log_path = configure_logging(log_path=log_path)
    ctx = RunContext(cfg=cfg, dry_run=dry_run, log_path=actual_log_path)

    console.rule(f"[bold cyan]{cfg.panel_title.upper()} INSTALLER[/bold cyan]")

    if not skip_host_checks:
        try:
            facts = gather_facts(cfg)
            check_host(cfg, facts, confirm=lambda q: confirm(q, default=False, interactive=interactive))
        except PreconditionError as e:
            logger.error("Pre-installation check failed: %s", e)
            return EXIT_PRECONDITION

    resume = not fresh
    if resume:
        try:
            previous = load_state(state_path)
        except ValueError as e:
            logger.error("Unreadable progress state: %s", e)
            logger.error("Re-run with --fresh to discard it and start at step 1")
            return EXIT_PRECONDITION
        if previous:
            logger.info("Found previous progress in %s", state_path)

    try:
        result: RunResult = run_pipeline(
            steps=build_steps(),
            ctx=ctx,
            state_path=state_path,
            resume=resume,
            announce=lambda ordinal, total, step: step_header(ordinal, total, step.label),
        )
    except KeyboardInterrupt:
        # Interrupted between steps: state on disk is already consistent.
        logger.warning("Interrupted")
        decision = decide_rollback(on_failure, interactive=interactive)
        rollback(ctx, decision, state_path=state_path)
        return EXIT_INTERRUPTED

    if result.failure is not None:
        report_failure(result.failure)
        decision = decide_rollback(on_failure, interactive=interactive)
        report = rollback(ctx, decision, state_path=state_path)
        for item, err in report.errors:
            console.print(f"[red]✗[/red] rollback: {item}: {err}")
        return EXIT_INTERRUPTED if result.failure.interrupted else EXIT_STEP_FAILED

    report_success(cfg, ctx)
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="nexpanel-installer")
    p.add_argument("--config", default=None, help="Path to installer config (yaml)")
    p.add_argument("--state", default=None, help="Path to the progress state file")
    p.add_argument("--log", default=None, help="Path to the action log")
    p.add_argument("--fresh", action="store_true", help="Ignore saved progress and start at step 1")
    p.add_argument("--non-interactive", action="store_true", help="Never prompt; take the safe default")
    p.add_argument(
        "--on-failure",
        choices=["ask", "keep", "revert"],
        default="ask",
        help="What to do with partial changes when a step fails",
    )
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")
    p.add_argument("--skip-host-checks", action="store_true", help="Skip OS/RAM/disk/network checks")

    args = p.parse_args(argv)

    if not is_root():
        console.print("[red]✗ This installer must be run as root[/red]")
        console.print("[yellow]Please run: sudo nexpanel-installer[/yellow]")
        return EXIT_PRECONDITION

    cfg = load_config(args.config)

    return run(
        cfg=cfg,
        state_path=args.state or cfg.state_file,
        log_path=args.log or cfg.log_file,
        fresh=bool(args.fresh),
        interactive=(not args.non_interactive) and stdin_is_interactive(),
        on_failure=args.on_failure,
        dry_run=bool(args.dry_run),
        skip_host_checks=bool(args.skip_host_checks),
    )


if __name__ == "__main__":
    sys.exit(main())

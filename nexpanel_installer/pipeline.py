from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .context import RunContext
from .errors import CommandTimeout
from .state_store import clear_state, load_state, save_state

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent provisioning step."""

    step_id: str
    label: str

    def run(self, ctx: RunContext) -> None:
        ...


@dataclass(frozen=True)
class StepResult:
    ok: bool
    error: Optional[str] = None
    timed_out: bool = False
    interrupted: bool = False


@dataclass(frozen=True)
class StepFailure:
    step_id: str
    ordinal: int
    label: str
    error: str
    log_path: str
    timed_out: bool = False
    interrupted: bool = False

    def describe(self) -> str:
        if self.interrupted:
            kind = "interrupted"
        elif self.timed_out:
            kind = "timed out"
        else:
            kind = "failed"
        return f"Step {self.ordinal} ({self.step_id}: {self.label}) {kind}: {self.error}"


@dataclass(frozen=True)
class RunResult:
    completed: bool
    last_completed: int
    total: int
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    failure: Optional[StepFailure] = None


def validate_steps(steps: Sequence[Step]) -> None:
    seen = set()
    for step in steps:
        if step.step_id in seen:
            raise ValueError(f"Duplicate step id: {step.step_id}")
        seen.add(step.step_id)


def execute_step(step: Step, ctx: RunContext) -> StepResult:
    """Invoke a step's action and turn its outcome into a StepResult."""

    try:
        step.run(ctx)
    except CommandTimeout as e:
        return StepResult(ok=False, error=str(e), timed_out=True)
    except KeyboardInterrupt:
        return StepResult(ok=False, error="interrupted by operator", interrupted=True)
    except Exception as e:
        logger.debug("Step %s raised", step.step_id, exc_info=True)
        return StepResult(ok=False, error=str(e) or type(e).__name__)
    return StepResult(ok=True)


def run_pipeline(
    *,
    steps: Sequence[Step],
    ctx: RunContext,
    state_path: str,
    resume: bool = True,
    announce: Optional[Callable[[int, int, Step], None]] = None,
) -> RunResult:
    """Run steps in order with resume semantics.

    Ordinals are 1-based positions in ``steps``. With ``resume`` set, steps
    up to the persisted ordinal are skipped. The first failing step halts the
    run; nothing after it executes and the persisted ordinal stays at the
    last completed step. The state file is removed once the final step
    succeeds.
    """

    validate_steps(steps)
    total = len(steps)

    if resume:
        last_completed = load_state(state_path)
    else:
        clear_state(state_path)
        last_completed = 0
    if last_completed:
        logger.info("Resuming after step %d of %d", last_completed, total)

    ran: List[str] = []
    skipped: List[str] = []

    for ordinal, step in enumerate(steps, start=1):
        if ordinal <= last_completed:
            logger.info("Skipping step %d/%d %s (already completed)", ordinal, total, step.step_id)
            skipped.append(step.step_id)
            continue

        if announce is not None:
            announce(ordinal, total, step)
        logger.info("[%d/%d] %s", ordinal, total, step.label)
        result = execute_step(step, ctx)

        if not result.ok:
            failure = StepFailure(
                step_id=step.step_id,
                ordinal=ordinal,
                label=step.label,
                error=result.error or "unknown error",
                log_path=ctx.log_path,
                timed_out=result.timed_out,
                interrupted=result.interrupted,
            )
            if result.timed_out:
                logger.error("Step %s timed out: %s", step.step_id, failure.error)
            else:
                logger.error("%s", failure.describe())
            return RunResult(
                completed=False,
                last_completed=last_completed,
                total=total,
                ran_steps=ran,
                skipped_steps=skipped,
                failure=failure,
            )

        save_state(state_path, ordinal)
        last_completed = ordinal
        ran.append(step.step_id)

    clear_state(state_path)
    return RunResult(
        completed=True,
        last_completed=last_completed,
        total=total,
        ran_steps=ran,
        skipped_steps=skipped,
    )

import logging

import pytest

from nexpanel_installer.errors import CommandFailed, CommandTimeout
from nexpanel_installer.pipeline import run_pipeline
from nexpanel_installer.rollback import RollbackDecision, rollback
from nexpanel_installer.state_store import load_state, save_state

from .conftest import RecordingStep, make_steps

IDS = ["s1", "s2", "s3", "s4", "s5"]


@pytest.mark.parametrize("k", [1, 2, 3, 4])
def test_failure_halts_run_and_keeps_completed_ordinal(ctx, state_path, k):
    calls = []
    failing = IDS[k - 1]
    steps = make_steps(IDS, calls, {failing: RuntimeError("boom")})

    result = run_pipeline(steps=steps, ctx=ctx, state_path=state_path, resume=False)

    assert not result.completed
    assert calls == IDS[:k]
    assert load_state(state_path) == k - 1
    assert result.last_completed == k - 1
    assert result.failure.step_id == failing
    assert result.failure.ordinal == k
    assert result.failure.error == "boom"
    assert result.failure.log_path == ctx.log_path


def test_resume_reruns_failed_step_and_never_earlier_ones(ctx, state_path):
    calls = []
    first = make_steps(IDS, calls, {"s3": CommandFailed(["apt-get", "install", "x"], 100)})
    run_pipeline(steps=first, ctx=ctx, state_path=state_path, resume=False)
    assert calls == ["s1", "s2", "s3"]

    calls.clear()
    result = run_pipeline(steps=make_steps(IDS, calls), ctx=ctx, state_path=state_path, resume=True)

    assert calls == ["s3", "s4", "s5"]
    assert result.completed
    assert result.skipped_steps == ["s1", "s2"]
    assert result.ran_steps == ["s3", "s4", "s5"]


def test_timeout_is_reported_distinctly(ctx, state_path, caplog):
    caplog.set_level(logging.INFO)
    calls = []
    steps = [
        RecordingStep("A", calls),
        RecordingStep("B", calls, fail=CommandTimeout(["apt-get", "update"], 300)),
        RecordingStep("C", calls),
    ]

    result = run_pipeline(steps=steps, ctx=ctx, state_path=state_path, resume=False)

    assert load_state(state_path) == 1
    assert calls == ["A", "B"]
    assert result.failure.timed_out
    assert not result.failure.interrupted
    assert "Step B timed out" in caplog.text


def test_ordinary_failure_is_not_flagged_as_timeout(ctx, state_path):
    calls = []
    steps = make_steps(["A", "B"], calls, {"B": CommandFailed(["false"], 1)})
    result = run_pipeline(steps=steps, ctx=ctx, state_path=state_path, resume=False)
    assert not result.failure.timed_out
    assert "Command failed (1)" in result.failure.error


def test_keep_then_resume_starts_at_failed_step(ctx, state_path):
    calls = []
    steps = make_steps(IDS, calls, {"s3": RuntimeError("disk full")})
    result = run_pipeline(steps=steps, ctx=ctx, state_path=state_path, resume=False)
    assert result.failure.ordinal == 3

    rollback(ctx, RollbackDecision.KEEP, state_path=state_path)
    assert load_state(state_path) == 2

    calls.clear()
    run_pipeline(steps=make_steps(IDS, calls), ctx=ctx, state_path=state_path, resume=True)
    assert calls[0] == "s3"


def test_success_removes_state_file(ctx, state_path, tmp_path):
    calls = []
    result = run_pipeline(steps=make_steps(IDS, calls), ctx=ctx, state_path=state_path, resume=False)
    assert result.completed
    assert result.last_completed == 5
    assert calls == IDS
    assert not (tmp_path / "state" / "install-state").exists()


def test_fresh_run_ignores_saved_progress(ctx, state_path):
    save_state(state_path, 3)
    calls = []
    steps = make_steps(IDS, calls, {"s1": RuntimeError("nope")})
    run_pipeline(steps=steps, ctx=ctx, state_path=state_path, resume=False)
    assert calls == ["s1"]
    assert load_state(state_path) == 0


def test_saved_ordinal_past_the_end_counts_as_complete(ctx, state_path):
    save_state(state_path, 9)
    calls = []
    result = run_pipeline(steps=make_steps(IDS, calls), ctx=ctx, state_path=state_path, resume=True)
    assert calls == []
    assert result.completed


def test_duplicate_step_ids_rejected_before_running(ctx, state_path):
    calls = []
    with pytest.raises(ValueError, match="Duplicate step id"):
        run_pipeline(steps=make_steps(["a", "b", "a"], calls), ctx=ctx, state_path=state_path)
    assert calls == []


def test_operator_interrupt_becomes_step_failure(ctx, state_path):
    calls = []
    steps = make_steps(["a", "b", "c"], calls, {"b": KeyboardInterrupt()})
    result = run_pipeline(steps=steps, ctx=ctx, state_path=state_path, resume=False)
    assert result.failure.interrupted
    assert calls == ["a", "b"]
    assert load_state(state_path) == 1


def test_announce_called_for_each_executed_step(ctx, state_path):
    save_state(state_path, 2)
    seen = []
    run_pipeline(
        steps=make_steps(IDS, []),
        ctx=ctx,
        state_path=state_path,
        resume=True,
        announce=lambda ordinal, total, step: seen.append((ordinal, total, step.step_id)),
    )
    assert seen == [(3, 5, "s3"), (4, 5, "s4"), (5, 5, "s5")]

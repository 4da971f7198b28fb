from pathlib import Path

import pytest

from nexpanel_installer import main as main_mod
from nexpanel_installer.rollback import RollbackDecision
from nexpanel_installer.state_store import load_state, save_state

from .conftest import RecordingStep


@pytest.fixture
def run_kwargs(cfg, state_path, tmp_path, reset_logging):
    return dict(
        cfg=cfg,
        state_path=state_path,
        log_path=str(tmp_path / "log" / "install.log"),
        interactive=False,
        skip_host_checks=True,
    )


def test_requires_root(monkeypatch):
    monkeypatch.setattr(main_mod, "is_root", lambda: False)
    assert main_mod.main([]) == main_mod.EXIT_PRECONDITION


def test_non_interactive_failure_keeps_partial_state():
    assert main_mod.decide_rollback("ask", interactive=False) is RollbackDecision.KEEP
    assert main_mod.decide_rollback("revert", interactive=False) is RollbackDecision.REVERT
    assert main_mod.decide_rollback("keep", interactive=True) is RollbackDecision.KEEP


def test_full_dry_run_completes(run_kwargs, state_path):
    rc = main_mod.run(dry_run=True, **run_kwargs)
    assert rc == main_mod.EXIT_OK
    assert load_state(state_path) == 0
    assert not Path(state_path).exists()


def _failing_steps(tmp_path, calls):
    conf = tmp_path / "x.conf"
    conf.write_text("old")

    def overwrite(ctx):
        ctx.write_file(str(conf), "new")
        ctx.write_file(str(tmp_path / "fresh.conf"), "created")

    return conf, [
        RecordingStep("one", calls),
        RecordingStep("two", calls, action=overwrite),
        RecordingStep("three", calls, fail=RuntimeError("boom")),
        RecordingStep("four", calls),
    ]


def test_step_failure_with_keep(run_kwargs, state_path, tmp_path, monkeypatch):
    calls = []
    conf, steps = _failing_steps(tmp_path, calls)
    monkeypatch.setattr(main_mod, "build_steps", lambda: steps)

    rc = main_mod.run(on_failure="ask", **run_kwargs)

    assert rc == main_mod.EXIT_STEP_FAILED
    assert calls == ["one", "two", "three"]
    assert load_state(state_path) == 2
    assert conf.read_text() == "new"
    assert (tmp_path / "fresh.conf").exists()


def test_step_failure_with_revert(run_kwargs, state_path, tmp_path, monkeypatch):
    calls = []
    conf, steps = _failing_steps(tmp_path, calls)
    monkeypatch.setattr(main_mod, "build_steps", lambda: steps)

    rc = main_mod.run(on_failure="revert", **run_kwargs)

    assert rc == main_mod.EXIT_STEP_FAILED
    assert conf.read_text() == "old"
    assert not (tmp_path / "fresh.conf").exists()
    assert not Path(state_path).exists()


def test_resumes_automatically_unless_fresh(run_kwargs, state_path, monkeypatch):
    calls = []
    monkeypatch.setattr(
        main_mod,
        "build_steps",
        lambda: [RecordingStep(i, calls) for i in ["a", "b", "c"]],
    )

    save_state(state_path, 2)
    assert main_mod.run(**run_kwargs) == main_mod.EXIT_OK
    assert calls == ["c"]

    calls.clear()
    save_state(state_path, 2)
    assert main_mod.run(fresh=True, **run_kwargs) == main_mod.EXIT_OK
    assert calls == ["a", "b", "c"]


def test_precondition_failure_mutates_nothing(run_kwargs, state_path, monkeypatch):
    from nexpanel_installer.lib.hostcheck import HostFacts

    calls = []
    monkeypatch.setattr(main_mod, "build_steps", lambda: [RecordingStep("a", calls)])
    monkeypatch.setattr(
        main_mod,
        "gather_facts",
        lambda cfg: HostFacts(os_id="ubuntu", os_version="22.04", ram_mb=512, disk_free_gb=50, online=True),
    )
    run_kwargs["skip_host_checks"] = False

    assert main_mod.run(**run_kwargs) == main_mod.EXIT_PRECONDITION
    assert calls == []
    assert not Path(state_path).exists()


def test_corrupt_state_file_stops_before_any_step(run_kwargs, state_path, monkeypatch, caplog):
    calls = []
    monkeypatch.setattr(main_mod, "build_steps", lambda: [RecordingStep("a", calls)])
    Path(state_path).parent.mkdir(parents=True)
    Path(state_path).write_text("garbage\n")

    assert main_mod.run(**run_kwargs) == main_mod.EXIT_PRECONDITION
    assert calls == []
    assert Path(state_path).read_text() == "garbage\n"
    assert "--fresh" in caplog.text

    assert main_mod.run(fresh=True, **run_kwargs) == main_mod.EXIT_OK
    assert calls == ["a"]


def _interrupt_at(ordinal):
    def header(n, total, label):
        if n == ordinal:
            raise KeyboardInterrupt

    return header


@pytest.mark.parametrize("on_failure", ["ask", "keep"])
def test_interrupt_between_steps_keeps_state(run_kwargs, state_path, tmp_path, monkeypatch, on_failure):
    calls = []
    conf, steps = _failing_steps(tmp_path, calls)
    monkeypatch.setattr(main_mod, "build_steps", lambda: steps)
    monkeypatch.setattr(main_mod, "step_header", _interrupt_at(3))

    rc = main_mod.run(on_failure=on_failure, **run_kwargs)

    assert rc == main_mod.EXIT_INTERRUPTED
    assert calls == ["one", "two"]
    assert load_state(state_path) == 2
    assert conf.read_text() == "new"


def test_interrupt_between_steps_with_revert(run_kwargs, state_path, tmp_path, monkeypatch):
    calls = []
    conf, steps = _failing_steps(tmp_path, calls)
    monkeypatch.setattr(main_mod, "build_steps", lambda: steps)
    monkeypatch.setattr(main_mod, "step_header", _interrupt_at(3))

    rc = main_mod.run(on_failure="revert", **run_kwargs)

    assert rc == main_mod.EXIT_INTERRUPTED
    assert calls == ["one", "two"]
    assert conf.read_text() == "old"
    assert not (tmp_path / "fresh.conf").exists()
    assert not Path(state_path).exists()


def test_interrupt_inside_step_exits_130(run_kwargs, state_path, monkeypatch):
    calls = []
    monkeypatch.setattr(
        main_mod,
        "build_steps",
        lambda: [RecordingStep("a", calls), RecordingStep("b", calls, fail=KeyboardInterrupt())],
    )

    rc = main_mod.run(on_failure="keep", **run_kwargs)

    assert rc == main_mod.EXIT_INTERRUPTED
    assert calls == ["a", "b"]
    assert load_state(state_path) == 1

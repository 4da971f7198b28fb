import pytest

from nexpanel_installer.ui import confirm, run_in_background


def test_confirm_non_interactive_returns_default():
    assert confirm("Roll back?", default=False, interactive=False) is False
    assert confirm("Proceed?", default=True, interactive=False) is True


def test_run_in_background_returns_result():
    assert run_in_background(lambda: 42, "Computing") == 42


def test_run_in_background_reraises():
    def boom():
        raise RuntimeError("apt exploded")

    with pytest.raises(RuntimeError, match="apt exploded"):
        run_in_background(boom, "Upgrading")

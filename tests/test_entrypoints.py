import runpy

import pytest

import cardsort.main as main


def test_module_entrypoint_exits_with_run_code(monkeypatch) -> None:
    monkeypatch.setattr(main, "run", lambda: 3)
    with pytest.raises(SystemExit) as excinfo:
        runpy.run_module("cardsort", run_name="__main__")
    assert excinfo.value.code == 3


def test_main_entry_exits_with_run_code(monkeypatch) -> None:
    monkeypatch.setattr(main, "run", lambda: 0)
    with pytest.raises(SystemExit) as excinfo:
        main.main_entry()
    assert excinfo.value.code == 0

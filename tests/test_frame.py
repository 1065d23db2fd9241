import pytest

from cardsort.export import ALL_COLUMNS
from cardsort.frame import label_phases, phase_rt_means, records_to_frame
from cardsort.models import DIMENSIONS


def _respond(session, dimension: str | None, rt: float) -> None:
    stimulus = session.current_stimulus()
    if dimension is None:
        used = {session.domain.reference_index(stimulus, item) for item in DIMENSIONS}
        (choice,) = set(range(4)) - used
    else:
        choice = session.domain.reference_index(stimulus, dimension)
    session.submit_response(choice, rt)


def test_empty_records_give_empty_frames() -> None:
    frame = records_to_frame([])
    assert frame.empty
    assert list(frame.columns) == list(ALL_COLUMNS)
    assert "phase" in label_phases(frame).columns
    assert phase_rt_means(frame) == {}


def test_records_to_frame_columns(make_session) -> None:
    session = make_session()
    _respond(session, "color", 400.0)
    _respond(session, None, 900.0)
    frame = records_to_frame(session.records)
    assert len(frame) == 2
    assert frame["correct"].tolist() == [True, False]
    assert frame["deck_number"].tolist() == [record.stimulus.number for record in session.records]


def test_label_phases_within_rule_period(make_session) -> None:
    session = make_session()
    # Two errors, one correct, one error, then a run of correct responses.
    for dimension in [None, None, "color", None, "color", "color", "color", "color"]:
        _respond(session, dimension, 500.0)
    labelled = label_phases(records_to_frame(session.records))
    assert labelled["phase"].tolist() == [
        "exploration",
        "exploration",
        "confirmation",
        "confirmation",
        "confirmation",
        "confirmation",
        "confirmation",
        "exploitation",
    ]


def test_phases_restart_after_category_switch(make_session) -> None:
    session = make_session()
    for _ in range(10):
        _respond(session, "color", 500.0)
    _respond(session, "color", 500.0)
    _respond(session, "shape", 500.0)
    labelled = label_phases(records_to_frame(session.records))
    assert labelled["phase"].tolist()[10:] == ["exploration", "confirmation"]


def test_phase_rt_means_uses_correct_trials(make_session) -> None:
    session = make_session()
    _respond(session, None, 2000.0)
    for rt in (800.0, 700.0, 600.0, 300.0, 100.0):
        _respond(session, "color", rt)
    means = phase_rt_means(records_to_frame(session.records))
    assert set(means) == {"confirmation", "exploitation"}
    assert means["confirmation"] == pytest.approx(700.0)
    assert means["exploitation"] == pytest.approx(200.0)

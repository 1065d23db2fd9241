from pathlib import Path

from cardsort.errors import ExportFormatError
from cardsort.export import ALL_COLUMNS, BOM, COLUMNS, read_csv, read_csv_file, to_csv, write_csv
from cardsort.models import DIMENSIONS


def _play(session, answers: list[str | None]) -> None:
    for dimension in answers:
        stimulus = session.current_stimulus()
        if dimension is None:
            used = {session.domain.reference_index(stimulus, item) for item in DIMENSIONS}
            (choice,) = set(range(4)) - used
        else:
            choice = session.domain.reference_index(stimulus, dimension)
        session.submit_response(choice, 512.25)


def test_header_order_and_bom(make_session) -> None:
    text = to_csv(make_session().records)
    assert text.startswith(BOM)
    header = text[len(BOM) :].split("\n")[0].split(";")
    assert tuple(header[: len(COLUMNS)]) == COLUMNS
    assert COLUMNS[0] == "participant_id"
    assert COLUMNS[-1] == "app_version"
    assert tuple(header) == ALL_COLUMNS


def test_row_values(make_session) -> None:
    session = make_session()
    _play(session, ["color"] * 10 + ["color", None])
    lines = to_csv(session.records).split("\n")
    assert len(lines) == 13

    shift_row = dict(zip(ALL_COLUMNS, lines[11].split(";")))
    assert shift_row["trial_index"] == "10"
    assert shift_row["correct"] == "false"
    assert shift_row["error_type"] == "perseverative"
    assert shift_row["rule_in_force"] == "shape"
    assert shift_row["prev_rule"] == "color"
    assert shift_row["categories_completed"] == "1"
    assert shift_row["response_time_ms"] == "512.25"
    assert shift_row["seed"] == "1234"

    first_row = dict(zip(ALL_COLUMNS, lines[1].split(";")))
    assert first_row["prev_rule"] == ""
    assert first_row["error_type"] == ""
    assert first_row["correct"] == "true"

    last_row = dict(zip(ALL_COLUMNS, lines[12].split(";")))
    assert last_row["error_type"] == "non-perseverative"


def test_values_with_separators_are_quoted(make_session) -> None:
    session = make_session(device_info='iPad; "kiosk", v2')
    _play(session, ["color"])
    row = to_csv(session.records).split("\n")[1]
    assert '"iPad; ""kiosk"", v2"' in row


def test_round_trip_is_lossless(make_session) -> None:
    session = make_session(device_info="line1\nline2; x")
    _play(session, ["color"] * 7 + [None] + ["color"] * 10 + ["color", "number", "shape", None])
    records = list(session.records)
    assert read_csv(to_csv(records)) == records


def test_round_trip_through_file(make_session, tmp_path: Path) -> None:
    session = make_session()
    _play(session, ["shape", "color", None])
    target = write_csv(session.records, tmp_path / "out" / "log.csv")
    assert target.read_bytes().startswith(b"\xef\xbb\xbf")
    assert read_csv_file(target) == list(session.records)


def test_empty_log_round_trip() -> None:
    assert read_csv(to_csv([])) == []


def test_missing_columns_rejected() -> None:
    try:
        read_csv("participant_id;session_id\np;s")
        raise AssertionError("Expected ExportFormatError for missing columns.")
    except ExportFormatError as exc:
        assert "missing columns" in str(exc)


def test_truncated_row_rejected(make_session) -> None:
    session = make_session()
    _play(session, ["color", "shape"])
    header, first, second = to_csv(session.records).split("\n")
    truncated = ";".join(second.split(";")[:12])
    try:
        read_csv("\n".join([header, first, truncated]))
        raise AssertionError("Expected ExportFormatError for truncated row.")
    except ExportFormatError as exc:
        assert "row 3" in str(exc)
        assert "missing value for categories_completed" in str(exc)


def test_bad_boolean_rejected(make_session) -> None:
    session = make_session()
    _play(session, ["color"])
    text = to_csv(session.records).replace(";true;", ";maybe;", 1)
    try:
        read_csv(text)
        raise AssertionError("Expected ExportFormatError for bad boolean.")
    except ExportFormatError as exc:
        assert "row 2" in str(exc)

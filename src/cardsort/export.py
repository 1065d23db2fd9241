"""Semicolon-delimited CSV export and import of trial logs."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from pathlib import Path

from .errors import ExportFormatError
from .models import Card, TrialRecord

BOM = "\ufeff"
DELIMITER = ";"

COLUMNS = (
    "participant_id",
    "session_id",
    "trial_index",
    "deck_color",
    "deck_shape",
    "deck_number",
    "selected_key_index",
    "correct",
    "error_type",
    "set_maintenance_error",
    "rule_in_force",
    "prev_rule",
    "categories_completed",
    "consecutive_correct",
    "response_time_ms",
    "timestamp_utc",
    "seed",
    "device_info",
    "app_version",
)
# Appended after the fixed columns so the table rebuilds records losslessly.
EXTRA_COLUMNS = (
    "category_index",
    "is_perseverative_response",
    "is_conceptual_response",
    "is_shift_trial",
)
ALL_COLUMNS = COLUMNS + EXTRA_COLUMNS

ERROR_TYPES = {"", "perseverative", "non-perseverative"}


def record_to_row(record: TrialRecord) -> dict[str, object]:
    """Flatten one record into export column values."""
    return {
        "participant_id": record.participant_id,
        "session_id": record.session_id,
        "trial_index": record.trial_index,
        "deck_color": record.stimulus.color,
        "deck_shape": record.stimulus.shape,
        "deck_number": record.stimulus.number,
        "selected_key_index": record.selected_index,
        "correct": record.correct,
        "error_type": record.error_type,
        "set_maintenance_error": record.set_maintenance_error,
        "rule_in_force": record.rule,
        "prev_rule": record.prev_rule,
        "categories_completed": record.categories_completed,
        "consecutive_correct": record.consecutive_correct,
        "response_time_ms": record.response_time_ms,
        "timestamp_utc": record.timestamp_utc,
        "seed": record.seed,
        "device_info": record.device_info,
        "app_version": record.app_version,
        "category_index": record.category_index,
        "is_perseverative_response": record.is_perseverative_response,
        "is_conceptual_response": record.is_conceptual_response,
        "is_shift_trial": record.is_shift_trial,
    }


def to_csv(records: Sequence[TrialRecord]) -> str:
    """Serialize records to a UTF-8-with-BOM, semicolon-delimited table."""
    lines = [BOM + DELIMITER.join(ALL_COLUMNS)]
    for record in records:
        row = record_to_row(record)
        lines.append(DELIMITER.join(_escape(row[column]) for column in ALL_COLUMNS))
    return "\n".join(lines)


def write_csv(records: Sequence[TrialRecord], path: Path | str) -> Path:
    """Write the export table to a file and return its path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(to_csv(records), encoding="utf-8", newline="")
    return target


def read_csv(text: str) -> list[TrialRecord]:
    """Parse an export table back into trial records."""
    if text.startswith(BOM):
        text = text[len(BOM) :]
    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=DELIMITER)
    header = tuple(reader.fieldnames or ())
    missing = [column for column in ALL_COLUMNS if column not in header]
    if missing:
        raise ExportFormatError(f"Export table is missing columns: {', '.join(missing)}")
    records: list[TrialRecord] = []
    for line_number, row in enumerate(reader, start=2):
        # DictReader fills cells missing from a short row with None.
        absent = next((column for column in ALL_COLUMNS if row.get(column) is None), None)
        if absent is not None:
            raise ExportFormatError(f"Invalid export row {line_number}: missing value for {absent}")
        try:
            records.append(_record_from_row(row))
        except (TypeError, ValueError) as exc:
            raise ExportFormatError(f"Invalid export row {line_number}: {exc}") from exc
    return records


def read_csv_file(path: Path | str) -> list[TrialRecord]:
    """Read an export table from a file."""
    return read_csv(Path(path).read_text(encoding="utf-8-sig"))


def _record_from_row(row: dict[str, str]) -> TrialRecord:
    error_type = row["error_type"]
    if error_type not in ERROR_TYPES:
        raise ValueError(f"unknown error_type {error_type!r}")
    prev_rule = row["prev_rule"]
    return TrialRecord(
        participant_id=row["participant_id"],
        session_id=row["session_id"],
        trial_index=int(row["trial_index"]),
        stimulus=Card(color=row["deck_color"], shape=row["deck_shape"], number=int(row["deck_number"])),
        selected_index=int(row["selected_key_index"]),
        correct=_parse_bool(row["correct"]),
        is_perseverative_response=_parse_bool(row["is_perseverative_response"]),
        is_perseverative_error=error_type == "perseverative",
        is_non_perseverative_error=error_type == "non-perseverative",
        is_conceptual_response=_parse_bool(row["is_conceptual_response"]),
        set_maintenance_error=_parse_bool(row["set_maintenance_error"]),
        is_shift_trial=_parse_bool(row["is_shift_trial"]),
        rule=row["rule_in_force"],
        prev_rule=prev_rule if prev_rule else None,
        categories_completed=int(row["categories_completed"]),
        consecutive_correct=int(row["consecutive_correct"]),
        category_index=int(row["category_index"]),
        response_time_ms=float(row["response_time_ms"]),
        timestamp_utc=row["timestamp_utc"],
        seed=int(row["seed"]),
        device_info=row["device_info"],
        app_version=row["app_version"],
    )


def _escape(value: object) -> str:
    """Render one cell, quoting values that contain separators or quotes."""
    if value is None:
        return ""
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, float):
        text = str(int(value)) if value.is_integer() else repr(value)
    else:
        text = str(value)
    if any(char in text for char in (";", ",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"expected true/false, got {value!r}")

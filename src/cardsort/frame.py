"""
Tabular views of trial logs for analysis.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd

from .export import ALL_COLUMNS, record_to_row
from .models import TrialRecord

PHASE_ORDER = ("exploration", "confirmation", "exploitation")
BOOL_COLUMNS = (
    "correct",
    "set_maintenance_error",
    "is_perseverative_response",
    "is_conceptual_response",
    "is_shift_trial",
)


def records_to_frame(records: Sequence[TrialRecord]) -> pd.DataFrame:
    """One row per trial, using the export column names."""
    if not records:
        return pd.DataFrame(columns=list(ALL_COLUMNS))
    frame = pd.DataFrame([record_to_row(record) for record in records], columns=list(ALL_COLUMNS))
    for col in BOOL_COLUMNS:
        frame[col] = frame[col].astype(bool)
    return frame


def label_phases(frame: pd.DataFrame, confirm_len: int = 3) -> pd.DataFrame:
    """
    Assign a learning phase to every trial within its rule period.

    exploration: period onset -> first correct
    confirmation: first correct -> confirm_len consecutive correct
    exploitation: after confirm_len consecutive correct
    """
    df = frame.copy()
    if df.empty:
        df["phase"] = pd.Categorical([], categories=list(PHASE_ORDER))
        return df

    df = df.sort_values(["session_id", "trial_index"])
    df["phase"] = pd.NA

    for _, grp in df.groupby(["session_id", "category_index"], sort=False):
        idxs = grp.index.to_list()
        correct = grp["correct"].astype(bool).to_numpy()

        first_correct = None
        hits = np.flatnonzero(correct)
        if hits.size:
            first_correct = int(hits[0])

        reacq_idx = None
        if confirm_len >= 1:
            for j in range(0, len(correct) - (confirm_len - 1)):
                if np.all(correct[j : j + confirm_len]):
                    reacq_idx = j + confirm_len - 1
                    break

        for i, row_idx in enumerate(idxs):
            if first_correct is None or i < first_correct:
                df.at[row_idx, "phase"] = "exploration"
            elif reacq_idx is None or i <= reacq_idx:
                df.at[row_idx, "phase"] = "confirmation"
            else:
                df.at[row_idx, "phase"] = "exploitation"

    df["phase"] = pd.Categorical(df["phase"], categories=list(PHASE_ORDER))
    return df


def phase_rt_means(frame: pd.DataFrame, confirm_len: int = 3) -> dict[str, float]:
    """Mean correct-trial response time per phase; phases without trials are omitted."""
    if frame.empty:
        return {}
    labelled = label_phases(frame, confirm_len=confirm_len)
    correct = labelled[labelled["correct"].astype(bool)]
    means = correct.groupby("phase", observed=True)["response_time_ms"].mean()
    return {str(phase): float(value) for phase, value in means.items() if not np.isnan(value)}

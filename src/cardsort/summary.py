"""Session-level aggregate scores computed from a trial log."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .models import SessionSummary, TrialRecord

EMPTY_SUMMARY = SessionSummary(
    total_trials=0,
    total_correct=0,
    total_errors=0,
    categories_completed=0,
    perseverative_responses=0,
    perseverative_errors=0,
    non_perseverative_errors=0,
    conceptual_level_responses=0,
    failure_to_maintain_set=0,
    trials_to_complete_first_category=0,
    trials_per_category=(),
    learning_to_learn=0.0,
    shift_efficiency_mean=0.0,
    mean_rt=0.0,
    mean_rt_correct=0.0,
    mean_rt_error=0.0,
)


def compute_summary(records: Sequence[TrialRecord]) -> SessionSummary:
    """Reduce a trial log to aggregate scores; partial logs are fine."""
    if not records:
        return EMPTY_SUMMARY

    categories_completed = records[-1].categories_completed
    correct_rts = [record.response_time_ms for record in records if record.correct]
    error_rts = [record.response_time_ms for record in records if not record.correct]

    first_category = 0
    for position, record in enumerate(records, start=1):
        if record.categories_completed >= 1:
            first_category = position
            break

    category_sizes = Counter(record.category_index for record in records)
    trials_per_category = tuple(category_sizes.get(index, 0) for index in range(categories_completed))

    shift_indices = [record.trial_index for record in records if record.is_shift_trial]
    shift_gaps = [later - earlier for earlier, later in zip(shift_indices, shift_indices[1:])]

    return SessionSummary(
        total_trials=len(records),
        total_correct=len(correct_rts),
        total_errors=len(error_rts),
        categories_completed=categories_completed,
        perseverative_responses=sum(1 for record in records if record.is_perseverative_response),
        perseverative_errors=sum(1 for record in records if record.is_perseverative_error),
        non_perseverative_errors=sum(1 for record in records if record.is_non_perseverative_error),
        conceptual_level_responses=sum(1 for record in records if record.is_conceptual_response),
        failure_to_maintain_set=sum(1 for record in records if record.set_maintenance_error),
        trials_to_complete_first_category=first_category,
        trials_per_category=trials_per_category,
        learning_to_learn=learning_to_learn(trials_per_category),
        shift_efficiency_mean=_mean(shift_gaps),
        mean_rt=_mean([record.response_time_ms for record in records]),
        mean_rt_correct=_mean(correct_rts),
        mean_rt_error=_mean(error_rts),
    )


def learning_to_learn(trials_per_category: Sequence[int]) -> float:
    """Relative drop in mean trials per category from the first half to the second.

    The first half holds the first `n // 2` categories; with fewer than two
    categories there is no first half and the score is 0.
    """
    half = len(trials_per_category) // 2
    first = _mean(trials_per_category[:half])
    second = _mean(trials_per_category[half:])
    if first <= 0:
        return 0.0
    return (first - second) / first


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(sum(values)) / len(values)

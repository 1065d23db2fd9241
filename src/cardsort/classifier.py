"""Per-trial response classification into the standard error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass

from .config import EngineConfig
from .rules import Evaluation


@dataclass(frozen=True)
class ResponseFlags:
    """Classification flags for one response."""

    is_perseverative_response: bool
    is_perseverative_error: bool
    is_non_perseverative_error: bool
    is_conceptual_response: bool
    set_maintenance_error: bool


def classify_response(evaluation: Evaluation, selected_index: int, config: EngineConfig) -> ResponseFlags:
    """Classify a response from its evaluation and the running streak.

    - perseverative response: selection follows the immediately preceding rule.
    - perseverative error: a perseverative response that is incorrect.
    - non-perseverative error: any other incorrect response.
    - conceptual response: correct, and at least the `conceptual_run`-th
      consecutive correct response of the current rule period.
    - set-maintenance error: incorrect after at least `set_loss_run`
      consecutive correct responses that had not yet completed the category.
    """
    perseverative = evaluation.prev_rule_index is not None and selected_index == evaluation.prev_rule_index
    incorrect = not evaluation.correct
    return ResponseFlags(
        is_perseverative_response=perseverative,
        is_perseverative_error=perseverative and incorrect,
        is_non_perseverative_error=incorrect and not perseverative,
        is_conceptual_response=evaluation.correct and evaluation.run_length >= config.conceptual_run,
        set_maintenance_error=incorrect and config.set_loss_run <= evaluation.streak_before < config.threshold,
    )

"""Hidden sorting rule state machine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from .config import CYCLIC_POLICY, EngineConfig
from .models import Card, StimulusDomain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Evaluation:
    """Outcome of one response under the rule in force for that trial."""

    rule: str
    prev_rule: str | None
    correct: bool
    expected_index: int
    prev_rule_index: int | None
    streak_before: int
    run_length: int
    consecutive_correct: int
    category_index: int
    categories_completed: int
    category_completed: bool
    is_shift_trial: bool


class RuleEngine:
    """Tracks the current rule, the running streak and completed categories.

    A switch triggered by a completed category takes effect on the next
    evaluated trial, which is reported as the shift trial.
    """

    def __init__(self, config: EngineConfig, rng: random.Random | None = None) -> None:
        """`rng` is required for the random switch policy; cyclic switching never draws from it."""
        if rng is None and config.switch_policy != CYCLIC_POLICY:
            raise ValueError(f"Switch policy '{config.switch_policy}' needs a seeded rng.")
        self.config = config
        self._rng = rng
        self.rule = config.rule_order[0]
        self.prev_rule: str | None = None
        self.consecutive_correct = 0
        self.categories_completed = 0
        self._pending_shift = False

    def evaluate(self, domain: StimulusDomain, stimulus: Card, selected_index: int) -> Evaluation:
        """Score one response and apply category completion."""
        rule = self.rule
        prev_rule = self.prev_rule
        is_shift_trial = self._pending_shift
        self._pending_shift = False

        expected_index = domain.reference_index(stimulus, rule)
        if expected_index is None:
            raise ValueError(f"Stimulus {stimulus} has no reference card for rule {rule}.")
        prev_rule_index = domain.reference_index(stimulus, prev_rule) if prev_rule is not None else None
        correct = selected_index == expected_index

        streak_before = self.consecutive_correct
        category_index = self.categories_completed
        category_completed = False
        if correct:
            self.consecutive_correct += 1
            run_length = self.consecutive_correct
            if self.consecutive_correct >= self.config.threshold:
                category_completed = True
                self._complete_category()
        else:
            run_length = 0
            self.consecutive_correct = 0

        return Evaluation(
            rule=rule,
            prev_rule=prev_rule,
            correct=correct,
            expected_index=expected_index,
            prev_rule_index=prev_rule_index,
            streak_before=streak_before,
            run_length=run_length,
            consecutive_correct=self.consecutive_correct,
            category_index=category_index,
            categories_completed=self.categories_completed,
            category_completed=category_completed,
            is_shift_trial=is_shift_trial,
        )

    def next_rule(self, completed_rule: str) -> str:
        """Return the rule that follows `completed_rule` under the switch policy."""
        order = self.config.rule_order
        if self.config.switch_policy == CYCLIC_POLICY:
            return order[(order.index(completed_rule) + 1) % len(order)]
        remaining = [rule for rule in order if rule != completed_rule]
        assert self._rng is not None
        return self._rng.choice(remaining)

    def _complete_category(self) -> None:
        completed_rule = self.rule
        self.categories_completed += 1
        self.consecutive_correct = 0
        self.prev_rule = completed_rule
        self.rule = self.next_rule(completed_rule)
        self._pending_shift = True
        logger.info(
            "Category %d completed under %s; next rule is %s",
            self.categories_completed,
            completed_rule,
            self.rule,
        )

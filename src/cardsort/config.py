"""Scoring and administration parameters for one session."""

from __future__ import annotations

from dataclasses import dataclass

from .models import DIMENSIONS

CYCLIC_POLICY = "cyclic"
RANDOM_POLICY = "random"
SWITCH_POLICIES = (CYCLIC_POLICY, RANDOM_POLICY)


@dataclass(frozen=True)
class EngineConfig:
    """Session parameters; defaults are the canonical 128-card administration."""

    threshold: int = 10
    conceptual_run: int = 3
    set_loss_run: int = 5
    max_trials: int = 128
    max_categories: int = 6
    rule_order: tuple[str, ...] = DIMENSIONS
    switch_policy: str = CYCLIC_POLICY
    avoid_repeats: bool = True

    def __post_init__(self) -> None:
        for name in ("threshold", "conceptual_run", "set_loss_run", "max_trials", "max_categories"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}.")
        if sorted(self.rule_order) != sorted(DIMENSIONS):
            raise ValueError(f"rule_order must be a permutation of {DIMENSIONS}, got {self.rule_order!r}.")
        if self.switch_policy not in SWITCH_POLICIES:
            raise ValueError(f"Unknown switch policy: {self.switch_policy}. Valid policies: {SWITCH_POLICIES}")

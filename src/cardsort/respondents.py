"""Scripted respondents for simulated administrations."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from .models import DIMENSIONS, Card, StimulusDomain


class Respondent(ABC):
    """Chooses a reference card for each stimulus and learns from feedback."""

    name = "base"

    def __init__(self, seed: int = 0) -> None:
        self._rng = random.Random(f"{seed}:{self.name}")

    @abstractmethod
    def choose(self, domain: StimulusDomain, stimulus: Card) -> int:
        """Return the 0-based index of the chosen reference card."""

    def feedback(self, correct: bool) -> None:
        """Receive correct/incorrect feedback for the last choice."""

    def response_time_ms(self) -> float:
        """Simulated latency in milliseconds."""
        return round(self._rng.uniform(450.0, 1600.0), 1)


class HypothesisTester(Respondent):
    """Win-stay, lose-shift over the sorting dimensions."""

    name = "ideal"

    def __init__(self, seed: int = 0) -> None:
        super().__init__(seed)
        self.hypothesis = DIMENSIONS[0]

    def choose(self, domain: StimulusDomain, stimulus: Card) -> int:
        index = domain.reference_index(stimulus, self.hypothesis)
        return 0 if index is None else index

    def feedback(self, correct: bool) -> None:
        if not correct:
            position = DIMENSIONS.index(self.hypothesis)
            self.hypothesis = DIMENSIONS[(position + 1) % len(DIMENSIONS)]


class Perseverator(Respondent):
    """Keeps sorting by the first dimension regardless of feedback."""

    name = "perseverative"

    def choose(self, domain: StimulusDomain, stimulus: Card) -> int:
        index = domain.reference_index(stimulus, DIMENSIONS[0])
        return 0 if index is None else index


class RandomResponder(Respondent):
    """Picks a reference card uniformly at random."""

    name = "random"

    def choose(self, domain: StimulusDomain, stimulus: Card) -> int:
        return self._rng.randrange(len(domain.reference_cards))


RESPONDENTS: dict[str, type[Respondent]] = {
    HypothesisTester.name: HypothesisTester,
    Perseverator.name: Perseverator,
    RandomResponder.name: RandomResponder,
}

"""Seeded stimulus deck construction."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator
from itertools import count

from .errors import DomainConfigError
from .models import DIMENSIONS, Card, StimulusDomain

logger = logging.getLogger(__name__)


def is_unambiguous(card: Card, references: tuple[Card, ...]) -> bool:
    """Return whether `card` shares at most one attribute with every reference card."""
    for reference in references:
        shared = sum(1 for dimension in DIMENSIONS if card.matches(reference, dimension))
        if shared > 1:
            return False
    return True


def valid_stimuli(domain: StimulusDomain) -> tuple[Card, ...]:
    """Enumerate every stimulus that maps each response to at most one rule.

    The color-, shape- and number-matching reference cards of an accepted
    stimulus are three different cards, so it is never identical to a
    reference card either.
    """
    cards = [
        Card(color=color, shape=shape, number=number)
        for color in domain.colors
        for shape in domain.shapes
        for number in domain.numbers
    ]
    return tuple(card for card in cards if is_unambiguous(card, domain.reference_cards))


class DeckGenerator:
    """Deterministic stimulus sequence keyed by `(seed, draw_index)`."""

    def __init__(self, domain: StimulusDomain, seed: int, avoid_repeats: bool = True) -> None:
        """Enumerate the valid stimulus space once for the session."""
        self.domain = domain
        self.seed = seed
        self.avoid_repeats = avoid_repeats
        self.stimuli = valid_stimuli(domain)
        if not self.stimuli:
            raise DomainConfigError(f"Domain '{domain.id}' admits no unambiguous stimulus cards.")
        self._drawn: list[int] = []
        logger.debug("Deck for domain %s has %d valid stimuli", domain.id, len(self.stimuli))

    def card_at(self, draw_index: int) -> Card:
        """Return the stimulus for one draw; replaying a seed replays the sequence."""
        if draw_index < 0:
            raise ValueError(f"draw_index must be non-negative, got {draw_index}.")
        while len(self._drawn) <= draw_index:
            self._drawn.append(self._draw(len(self._drawn)))
        return self.stimuli[self._drawn[draw_index]]

    def take(self, n: int) -> list[Card]:
        """Return the first `n` stimuli."""
        return [self.card_at(index) for index in range(n)]

    def __iter__(self) -> Iterator[Card]:
        for index in count():
            yield self.card_at(index)

    def _draw(self, draw_index: int) -> int:
        """Pick one position in the stimulus space for a draw."""
        rng = random.Random(f"{self.seed}:{draw_index}")
        size = len(self.stimuli)
        if not self.avoid_repeats or draw_index == 0 or size == 1:
            return rng.randrange(size)
        # Skip over the previous position so consecutive stimuli differ.
        previous = self._drawn[draw_index - 1]
        offset = rng.randrange(size - 1)
        return offset if offset < previous else offset + 1

"""Core domain models for card sorting sessions."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import DomainConfigError

COLOR = "color"
SHAPE = "shape"
NUMBER = "number"
DIMENSIONS = (COLOR, SHAPE, NUMBER)

REFERENCE_CARD_COUNT = 4


@dataclass(frozen=True)
class Card:
    """One card: a color, a shape and a symbol count."""

    color: str
    shape: str
    number: int

    def value(self, dimension: str) -> str | int:
        """Return the attribute value for one dimension."""
        if dimension == COLOR:
            return self.color
        if dimension == SHAPE:
            return self.shape
        if dimension == NUMBER:
            return self.number
        raise ValueError(f"Unknown dimension: {dimension}")

    def matches(self, other: Card, dimension: str) -> bool:
        """Return whether both cards share the value of `dimension`."""
        return self.value(dimension) == other.value(dimension)

    def label(self) -> str:
        """Human-readable card description."""
        plural = "" if self.number == 1 else "s"
        return f"{self.number} {self.color} {self.shape}{plural}"


@dataclass(frozen=True)
class StimulusDomain:
    """Attribute palette plus the fixed reference deck for a session.

    Every dimension has exactly four distinct values and every reference card
    carries a different value from the others on each dimension, so each
    stimulus matches exactly one reference card per dimension.
    """

    id: str
    colors: tuple[str, ...]
    shapes: tuple[str, ...]
    numbers: tuple[int, ...]
    reference_cards: tuple[Card, ...]
    title: str = ""

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise DomainConfigError("Stimulus domain id is required.")
        for dimension in DIMENSIONS:
            values = self.values(dimension)
            if len(values) != REFERENCE_CARD_COUNT:
                raise DomainConfigError(
                    f"Domain '{self.id}' needs {REFERENCE_CARD_COUNT} {dimension} values, got {len(values)}."
                )
            if len(set(values)) != len(values):
                raise DomainConfigError(f"Domain '{self.id}' has duplicate {dimension} values.")
        if len(self.reference_cards) != REFERENCE_CARD_COUNT:
            raise DomainConfigError(
                f"Domain '{self.id}' needs {REFERENCE_CARD_COUNT} reference cards, got {len(self.reference_cards)}."
            )
        for dimension in DIMENSIONS:
            allowed = set(self.values(dimension))
            seen = [card.value(dimension) for card in self.reference_cards]
            unknown = [value for value in seen if value not in allowed]
            if unknown:
                raise DomainConfigError(f"Domain '{self.id}' reference cards use unknown {dimension} {unknown[0]!r}.")
            if len(set(seen)) != len(seen):
                raise DomainConfigError(f"Domain '{self.id}' reference cards repeat a {dimension} value.")

    def values(self, dimension: str) -> tuple[str, ...] | tuple[int, ...]:
        """Return the ordered values of one dimension."""
        if dimension == COLOR:
            return self.colors
        if dimension == SHAPE:
            return self.shapes
        if dimension == NUMBER:
            return self.numbers
        raise ValueError(f"Unknown dimension: {dimension}")

    def reference_index(self, card: Card, dimension: str) -> int | None:
        """Return the index of the reference card matching `card` on `dimension`."""
        for index, reference in enumerate(self.reference_cards):
            if reference.matches(card, dimension):
                return index
        return None


CLASSIC_DOMAIN = StimulusDomain(
    id="classic",
    colors=("red", "green", "yellow", "blue"),
    shapes=("triangle", "star", "cross", "circle"),
    numbers=(1, 2, 3, 4),
    reference_cards=(
        Card(color="red", shape="triangle", number=1),
        Card(color="green", shape="star", number=2),
        Card(color="yellow", shape="cross", number=3),
        Card(color="blue", shape="circle", number=4),
    ),
    title="Classic four-color deck",
)


@dataclass(frozen=True)
class TrialRecord:
    """Immutable snapshot of one evaluated and classified trial."""

    participant_id: str
    session_id: str
    trial_index: int
    stimulus: Card
    selected_index: int
    correct: bool
    is_perseverative_response: bool
    is_perseverative_error: bool
    is_non_perseverative_error: bool
    is_conceptual_response: bool
    set_maintenance_error: bool
    is_shift_trial: bool
    rule: str
    prev_rule: str | None
    categories_completed: int
    consecutive_correct: int
    category_index: int
    response_time_ms: float
    timestamp_utc: str
    seed: int
    device_info: str
    app_version: str

    @property
    def error_type(self) -> str:
        """Return `perseverative`, `non-perseverative` or an empty label."""
        if self.correct:
            return ""
        if self.is_perseverative_error:
            return "perseverative"
        if self.is_non_perseverative_error:
            return "non-perseverative"
        return ""


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate scores for a trial log."""

    total_trials: int
    total_correct: int
    total_errors: int
    categories_completed: int
    perseverative_responses: int
    perseverative_errors: int
    non_perseverative_errors: int
    conceptual_level_responses: int
    failure_to_maintain_set: int
    trials_to_complete_first_category: int
    trials_per_category: tuple[int, ...]
    learning_to_learn: float
    shift_efficiency_mean: float
    mean_rt: float
    mean_rt_correct: float
    mean_rt_error: float

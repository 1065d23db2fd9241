"""Session facade for administering one card sorting test."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import uuid4

from . import __version__
from .classifier import classify_response
from .config import EngineConfig
from .deck import DeckGenerator
from .errors import InvalidOperationError, InvalidResponseError, SeedError
from .models import CLASSIC_DOMAIN, Card, SessionSummary, StimulusDomain, TrialRecord
from .rules import RuleEngine
from .summary import compute_summary

logger = logging.getLogger(__name__)

SEED_LIMIT = 2**32
MAX_CATEGORIES_REACHED = "max_categories"
MAX_TRIALS_REACHED = "max_trials"
ABANDONED = "abandoned"

Clock = Callable[[], datetime]


def parse_seed(seed: object) -> int:
    """Validate a session seed; `None` draws a fresh one from system entropy."""
    if seed is None:
        return random.SystemRandom().randrange(SEED_LIMIT)
    if isinstance(seed, bool):
        raise SeedError(f"Seed must be an integer, got {seed!r}.")
    if isinstance(seed, str):
        text = seed.strip()
        if not (text.isascii() and text.isdigit()):
            raise SeedError(f"Seed must be a non-negative decimal integer, got {seed!r}.")
        value = int(text)
    elif isinstance(seed, int):
        value = seed
    else:
        raise SeedError(f"Seed must be an integer, got {type(seed).__name__}.")
    if not 0 <= value < SEED_LIMIT:
        raise SeedError(f"Seed must be in [0, {SEED_LIMIT}), got {value}.")
    return value


def _utc_now() -> datetime:
    return datetime.now(UTC)


class WCSTSession:
    """Coordinates stimulus generation, rule evaluation and classification.

    Each instance owns its deck, rule state and trial log; nothing is shared
    across sessions.
    """

    def __init__(
        self,
        participant_id: str,
        *,
        session_id: str | None = None,
        seed: object = None,
        config: EngineConfig | None = None,
        domain: StimulusDomain | None = None,
        device_info: str = "",
        app_version: str = __version__,
        clock: Clock = _utc_now,
    ) -> None:
        """Bootstrap a session; malformed seeds fail here."""
        self.seed = parse_seed(seed)
        self.participant_id = participant_id.strip()
        self.session_id = session_id.strip() if session_id and session_id.strip() else str(uuid4())
        self.config = config if config is not None else EngineConfig()
        self.domain = domain if domain is not None else CLASSIC_DOMAIN
        self.device_info = device_info
        self.app_version = app_version
        self._clock = clock
        self._deck = DeckGenerator(self.domain, self.seed, avoid_repeats=self.config.avoid_repeats)
        self._rules = RuleEngine(self.config, random.Random(f"{self.seed}:rules"))
        self._records: list[TrialRecord] = []
        self.termination_reason: str | None = None
        logger.info(
            "Started session %s for participant %r (seed=%d, domain=%s, policy=%s)",
            self.session_id,
            self.participant_id,
            self.seed,
            self.domain.id,
            self.config.switch_policy,
        )

    @property
    def records(self) -> tuple[TrialRecord, ...]:
        """Return the trial log in submission order."""
        return tuple(self._records)

    @property
    def is_finished(self) -> bool:
        """Return whether the session accepts no more responses."""
        return self.termination_reason is not None

    @property
    def current_rule(self) -> str:
        """Return the rule that will score the next response."""
        return self._rules.rule

    @property
    def reference_cards(self) -> tuple[Card, ...]:
        """Return the four reference cards shown to the subject."""
        return self.domain.reference_cards

    def current_stimulus(self) -> Card:
        """Return the stimulus for the active trial."""
        self._require_active()
        return self._deck.card_at(len(self._records))

    def submit_response(self, selected_index: int, response_time_ms: float) -> TrialRecord:
        """Evaluate, classify and log one response for the active trial."""
        self._require_active()
        if isinstance(selected_index, bool) or not isinstance(selected_index, int):
            raise InvalidResponseError(f"Selected index must be an integer, got {selected_index!r}.")
        if not 0 <= selected_index < len(self.domain.reference_cards):
            raise InvalidResponseError(f"Selected index {selected_index} is outside the reference deck.")
        if isinstance(response_time_ms, bool) or not isinstance(response_time_ms, int | float):
            raise InvalidResponseError(f"Response time must be a number, got {response_time_ms!r}.")
        if not math.isfinite(response_time_ms) or response_time_ms < 0:
            raise InvalidResponseError(f"Response time must be finite and non-negative, got {response_time_ms}.")

        trial_index = len(self._records)
        stimulus = self._deck.card_at(trial_index)
        evaluation = self._rules.evaluate(self.domain, stimulus, selected_index)
        flags = classify_response(evaluation, selected_index, self.config)
        record = TrialRecord(
            participant_id=self.participant_id,
            session_id=self.session_id,
            trial_index=trial_index,
            stimulus=stimulus,
            selected_index=selected_index,
            correct=evaluation.correct,
            is_perseverative_response=flags.is_perseverative_response,
            is_perseverative_error=flags.is_perseverative_error,
            is_non_perseverative_error=flags.is_non_perseverative_error,
            is_conceptual_response=flags.is_conceptual_response,
            set_maintenance_error=flags.set_maintenance_error,
            is_shift_trial=evaluation.is_shift_trial,
            rule=evaluation.rule,
            prev_rule=evaluation.prev_rule,
            categories_completed=evaluation.categories_completed,
            consecutive_correct=evaluation.consecutive_correct,
            category_index=evaluation.category_index,
            response_time_ms=float(response_time_ms),
            timestamp_utc=self._clock().isoformat(),
            seed=self.seed,
            device_info=self.device_info,
            app_version=self.app_version,
        )
        self._records.append(record)
        logger.debug(
            "Trial %d: rule=%s selected=%d correct=%s error=%s",
            trial_index,
            record.rule,
            selected_index,
            record.correct,
            record.error_type or "-",
        )

        if record.categories_completed >= self.config.max_categories:
            self._finish(MAX_CATEGORIES_REACHED)
        elif len(self._records) >= self.config.max_trials:
            self._finish(MAX_TRIALS_REACHED)
        return record

    def summary(self) -> SessionSummary:
        """Return aggregate scores for the responses so far."""
        return compute_summary(self._records)

    def abandon(self) -> None:
        """End the session early; the log stays available."""
        if not self.is_finished:
            self._finish(ABANDONED)

    def _finish(self, reason: str) -> None:
        self.termination_reason = reason
        logger.info("Session %s ended after %d trials (%s)", self.session_id, len(self._records), reason)

    def _require_active(self) -> None:
        if self.termination_reason is not None:
            raise InvalidOperationError(f"Session {self.session_id} has ended ({self.termination_reason}).")

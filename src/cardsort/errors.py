"""Exception types raised by the card sorting engine."""

from __future__ import annotations


class CardSortError(Exception):
    """Base class for engine failures."""


class DomainConfigError(CardSortError, ValueError):
    """Stimulus domain definition is malformed."""


class SeedError(CardSortError, ValueError):
    """Session seed is absent in a non-reproducible form or malformed."""


class InvalidResponseError(CardSortError, ValueError):
    """Submitted response cannot be evaluated."""


class InvalidOperationError(CardSortError, RuntimeError):
    """Operation is not allowed in the current session state."""


class ExportFormatError(CardSortError, ValueError):
    """Exported trial table cannot be parsed back into records."""

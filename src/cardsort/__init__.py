"""Computerized card sorting test: trial engine, response scoring and session summaries."""

from __future__ import annotations

import re
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path


# Matches `version = "..."` inside the [project] table only.
_PROJECT_VERSION = re.compile(r'^\[project\][ \t]*$(?:(?!^\[).)*?^version\s*=\s*"([^"]+)"', re.MULTILINE | re.DOTALL)


def _checkout_version() -> str | None:
    """Version declared by the nearest pyproject.toml when running from a checkout."""
    for directory in Path(__file__).resolve().parents:
        manifest = directory / "pyproject.toml"
        if manifest.is_file():
            found = _PROJECT_VERSION.search(manifest.read_text(encoding="utf-8"))
            return found.group(1) if found else None
    return None


def _resolve_version() -> str:
    declared = _checkout_version()
    if declared is not None:
        return declared
    try:
        return version("cardsort")
    except PackageNotFoundError:
        return "0+unknown"


__version__ = _resolve_version()

# Imported after __version__ so session records can stamp the app version.
from .config import EngineConfig  # noqa: E402
from .errors import (  # noqa: E402
    CardSortError,
    DomainConfigError,
    ExportFormatError,
    InvalidOperationError,
    InvalidResponseError,
    SeedError,
)
from .models import CLASSIC_DOMAIN, Card, SessionSummary, StimulusDomain, TrialRecord  # noqa: E402
from .session import WCSTSession  # noqa: E402
from .summary import compute_summary  # noqa: E402

__all__ = [
    "CLASSIC_DOMAIN",
    "Card",
    "CardSortError",
    "DomainConfigError",
    "EngineConfig",
    "ExportFormatError",
    "InvalidOperationError",
    "InvalidResponseError",
    "SeedError",
    "SessionSummary",
    "StimulusDomain",
    "TrialRecord",
    "WCSTSession",
    "__version__",
    "compute_summary",
]

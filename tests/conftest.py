from __future__ import annotations

import shutil
import sys
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cardsort.config import EngineConfig  # noqa: E402
from cardsort.session import WCSTSession  # noqa: E402

FIXED_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(name="tmp_path")
def workspace_tmp_path() -> Iterator[Path]:
    """Per-test scratch directory under ``.tmp_pytest/`` in the checkout, replacing pytest's builtin."""
    scratch = ROOT / ".tmp_pytest"
    target = scratch / uuid4().hex
    target.mkdir(parents=True)
    yield target
    shutil.rmtree(target, ignore_errors=True)
    if scratch.is_dir() and not any(scratch.iterdir()):
        scratch.rmdir()


@pytest.fixture
def make_session() -> Callable[..., WCSTSession]:
    """Build sessions with a fixed seed and clock unless overridden."""

    def factory(seed: object = 1234, config: EngineConfig | None = None, **kwargs: object) -> WCSTSession:
        kwargs.setdefault("session_id", "s-1")
        kwargs.setdefault("clock", lambda: FIXED_TIME)
        return WCSTSession("p-01", seed=seed, config=config, **kwargs)  # type: ignore[arg-type]

    return factory

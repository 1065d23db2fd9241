"""Module entrypoint for `python -m cardsort`."""

from __future__ import annotations

from .main import main_entry

if __name__ == "__main__":  # pragma: no cover
    main_entry()

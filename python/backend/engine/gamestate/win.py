"""Win detection."""

from __future__ import annotations

from typing import Iterable

from backend.models.board import Piece


def is_solved(pieces: Iterable[Piece]) -> bool:
    """True iff every piece, gaps included, sits on its identity position."""
    return all(p.is_home for p in pieces)


def misplaced(pieces: Iterable[Piece]) -> list[Piece]:
    return [p for p in pieces if not p.is_home]

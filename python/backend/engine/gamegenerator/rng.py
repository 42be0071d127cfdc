"""Deterministic pseudo-random source shared by every seeded operation."""

from __future__ import annotations

UINT32_MASK = 0xFFFFFFFF
UINT32_SCALE = 4294967296  # 2**32

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223


class SeededRandom:
    """Numerical Recipes linear congruential generator.

    The recurrence must stay bit-exact: challenge codes shared between
    players are only reproducible if every host draws the same sequence.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed & UINT32_MASK
        self.state = self.seed

    def next(self) -> int:
        """Advance and return the new 32-bit state."""
        self.state = (LCG_MULTIPLIER * self.state + LCG_INCREMENT) & UINT32_MASK
        return self.state

    def next_float(self) -> float:
        """Return a float in ``[0, 1)``."""
        return self.next() / UINT32_SCALE

    def next_int(self, n: int) -> int:
        """Return an integer in ``[0, n)``."""
        if n <= 0:
            raise ValueError(f"Upper bound must be positive, got {n}.")
        return int(self.next_float() * n)

"""Challenge identity: the ``(seed, steps, board)`` triple a host shares."""

from __future__ import annotations

import random
from dataclasses import dataclass
from urllib.parse import parse_qs, urlencode

from backend.models.boards import BOARDS

DEFAULT_STEPS = 250
UINT32_MASK = 0xFFFFFFFF


def random_seed() -> int:
    """Return a fresh 32-bit seed for a non-reproducible shuffle."""
    return random.getrandbits(32)


@dataclass(frozen=True)
class Challenge:
    seed: int
    steps: int = DEFAULT_STEPS
    board: str = "default"
    randomize_gaps: bool = False

    @classmethod
    def random(cls, steps: int = DEFAULT_STEPS, board: str = "default") -> Challenge:
        return cls(seed=random_seed(), steps=steps, board=board)

    # -- query-string codec ---------------------------------------------------

    def to_query(self) -> str:
        """Encode as ``seed=..&steps=..&board=..`` (plus ``randomizeGaps``)."""
        params: dict[str, str] = {
            "seed": str(self.seed),
            "steps": str(self.steps),
            "board": self.board,
        }
        if self.randomize_gaps:
            params["randomizeGaps"] = "true"
        return urlencode(params)

    @classmethod
    def from_query(cls, query: str) -> Challenge:
        """Decode a query string; a leading ``?`` or full URL is tolerated.

        Unknown boards fall back to ``default``. Missing or non-numeric
        ``seed``/``steps`` raise ``ValueError``.
        """
        if "?" in query:
            query = query.split("?", 1)[1]
        params = parse_qs(query)

        def _first(key: str) -> str | None:
            values = params.get(key)
            return values[0] if values else None

        raw_seed = _first("seed")
        raw_steps = _first("steps")
        if raw_seed is None or raw_steps is None:
            raise ValueError(f"Challenge code needs seed and steps: {query!r}")
        try:
            seed = int(raw_seed) & UINT32_MASK
            steps = int(raw_steps)
        except ValueError:
            raise ValueError(f"Challenge seed and steps must be integers: {query!r}") from None

        board = _first("board") or "default"
        if board not in BOARDS:
            board = "default"
        randomize = (_first("randomizeGaps") or "").lower() == "true"
        return cls(seed=seed, steps=steps, board=board, randomize_gaps=randomize)

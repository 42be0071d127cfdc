"""Registry of the built-in board variants."""

from __future__ import annotations

from backend.models.board import BoardConfig

_BASE_LARGE = (
    (0, 0), (3, 0), (5, 0),
    (0, 3), (3, 3), (6, 3),
    (0, 6), (5, 6),
)


def _shifted(dx: int, dy: int) -> list[tuple[int, int]]:
    return [(x + dx, y + dy) for x, y in _BASE_LARGE]


DEFAULT_BOARD = BoardConfig(
    width=8,
    height=8,
    gap_identities=[(7, 6), (7, 7)],
    large_pieces=_BASE_LARGE,
)

# Two 8×8 halves side by side; gaps in the bottom-right of the right half.
HORIZONTAL_BOARD = BoardConfig(
    width=16,
    height=8,
    gap_identities=[(15, 6), (15, 7)],
    large_pieces=_shifted(0, 0) + _shifted(8, 0),
)

# Two 8×8 halves stacked; gaps in the bottom-right of the bottom half.
VERTICAL_BOARD = BoardConfig(
    width=8,
    height=16,
    gap_identities=[(7, 14), (7, 15)],
    large_pieces=_shifted(0, 0) + _shifted(0, 8),
)

BOARDS: dict[str, BoardConfig] = {
    "default": DEFAULT_BOARD,
    "horizontal": HORIZONTAL_BOARD,
    "vertical": VERTICAL_BOARD,
}

# Mixed into shuffle seeds; changing a value changes every challenge on it.
BOARD_HASHES: dict[str, int] = {
    "default": 0,
    "horizontal": 1,
    "vertical": 2,
}


def get_board(slug: str) -> BoardConfig:
    try:
        return BOARDS[slug]
    except KeyError:
        raise KeyError(
            f"Unknown board {slug!r}; expected one of {', '.join(BOARDS)}."
        ) from None


def board_hash(slug: str) -> int:
    get_board(slug)
    return BOARD_HASHES[slug]

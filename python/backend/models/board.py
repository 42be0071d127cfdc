"""Board model for the gap slide puzzle."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Iterable, NamedTuple


class InvalidBoardConfig(ValueError):
    """Raised when a board layout violates its structural invariants."""


class Side(StrEnum):
    """Neighbour of a gap, named relative to the gap itself.

    ``Side.W`` is the cell to the left of the gap; sliding from it moves a
    piece *rightward* into the gap.
    """

    N = "N"
    E = "E"
    S = "S"
    W = "W"

    @property
    def offset(self) -> tuple[int, int]:
        return _OFFSETS[self]

    @property
    def opposite(self) -> Side:
        return _OPPOSITES[self]


_OFFSETS: dict[Side, tuple[int, int]] = {
    Side.N: (0, -1),
    Side.E: (1, 0),
    Side.S: (0, 1),
    Side.W: (-1, 0),
}

_OPPOSITES: dict[Side, Side] = {
    Side.N: Side.S,
    Side.S: Side.N,
    Side.E: Side.W,
    Side.W: Side.E,
}


class Role(StrEnum):
    SMALL = "small"
    LARGE = "large"
    GAP = "gap"


Cell = tuple[int, int]


def block(x: int, y: int) -> tuple[Cell, Cell, Cell, Cell]:
    """Return the four cells of the 2×2 block anchored at ``(x, y)``."""
    return ((x, y), (x + 1, y), (x, y + 1), (x + 1, y + 1))


# -- board layout -------------------------------------------------------------


@dataclass(frozen=True)
class BoardConfig:
    """Static description of a board variant.

    ``gap_identities`` are the gap cells of the solved layout; each one is
    also the permanent identity of the gap created there. ``large_pieces``
    holds the top-left anchors of the 2×2 pieces.
    """

    width: int
    height: int
    gap_identities: frozenset[Cell] = field(default_factory=frozenset)
    large_pieces: frozenset[Cell] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Accept any iterable of pairs; store canonical frozensets.
        object.__setattr__(self, "gap_identities", _cells(self.gap_identities))
        object.__setattr__(self, "large_pieces", _cells(self.large_pieces))

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BoardConfig:
        """Build a config from its plain structured form.

        Example::

            BoardConfig.from_dict({
                "width": 4, "height": 4,
                "gapIdentities": [{"x": 3, "y": 3}],
                "largePieces": [{"x": 0, "y": 0}],
            })
        """
        gaps = data.get("gapIdentities", data.get("gap_identities", []))
        large = data.get("largePieces", data.get("large_pieces", []))
        try:
            return cls(
                width=int(data["width"]),
                height=int(data["height"]),
                gap_identities=_cells(gaps),
                large_pieces=_cells(large),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidBoardConfig(f"Malformed board description: {exc!r}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "gapIdentities": [{"x": x, "y": y} for x, y in sorted(self.gap_identities)],
            "largePieces": [{"x": x, "y": y} for x, y in sorted(self.large_pieces)],
        }

    # -- queries --------------------------------------------------------------

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def large_cells(self) -> set[Cell]:
        return {c for anchor in self.large_pieces for c in block(*anchor)}

    def validate(self) -> None:
        """Raise :class:`InvalidBoardConfig` if the layout is inconsistent."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidBoardConfig(
                f"Board dimensions must be positive, got {self.width}×{self.height}."
            )

        for x, y in sorted(self.gap_identities):
            if not self.in_bounds(x, y):
                raise InvalidBoardConfig(f"Gap identity ({x}, {y}) lies outside the board.")

        covered: dict[Cell, Cell] = {}
        for anchor in sorted(self.large_pieces):
            for cell in block(*anchor):
                if not self.in_bounds(*cell):
                    raise InvalidBoardConfig(
                        f"Large piece at {anchor} extends outside the board."
                    )
                if cell in covered:
                    raise InvalidBoardConfig(
                        f"Large pieces at {covered[cell]} and {anchor} overlap at {cell}."
                    )
                if cell in self.gap_identities:
                    raise InvalidBoardConfig(
                        f"Large piece at {anchor} overlaps gap identity {cell}."
                    )
                covered[cell] = anchor


def _point(p: Any) -> Cell:
    if isinstance(p, dict):
        return (int(p["x"]), int(p["y"]))
    x, y = p
    return (int(x), int(y))


def _cells(points: Iterable[Any]) -> frozenset[Cell]:
    return frozenset(_point(p) for p in points)


# -- pieces and grid ----------------------------------------------------------


@dataclass
class Piece:
    """A single game object; gaps are pieces with ``role == Role.GAP``."""

    id: str
    role: Role
    x: int
    y: int
    home_x: int
    home_y: int
    selected: bool = False

    @property
    def is_gap(self) -> bool:
        return self.role is Role.GAP

    @property
    def is_large(self) -> bool:
        return self.role is Role.LARGE

    @property
    def is_home(self) -> bool:
        return self.x == self.home_x and self.y == self.home_y

    def cells(self) -> tuple[Cell, ...]:
        """Cells currently covered by this piece."""
        if self.is_large:
            return block(self.x, self.y)
        return ((self.x, self.y),)

    def copy(self) -> Piece:
        return replace(self)


class GridCell(NamedTuple):
    """Grid entry: the occupying piece and the cell's offset inside it."""

    piece_id: str
    ox: int = 0
    oy: int = 0

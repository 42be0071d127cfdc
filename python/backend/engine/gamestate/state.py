"""Holds the pieces of a puzzle and the grid index derived from them."""

from __future__ import annotations

from typing import Iterable

from backend.models.board import BoardConfig, Cell, GridCell, Piece, Role


class PuzzleState:
    """Pieces plus a flat ``y * width + x`` grid of :class:`GridCell`.

    ``pieces`` is the source of truth. The grid is a lookup cache kept in
    step by :meth:`apply_cell_update` after each move and recomputed by
    :meth:`rebuild_grid` after bulk changes.
    """

    def __init__(self, config: BoardConfig, pieces: list[Piece]) -> None:
        config.validate()
        self.config = config
        self.pieces = pieces
        self._by_id: dict[str, Piece] = {p.id: p for p in pieces}
        self.grid: list[GridCell | None] = []
        self.rebuild_grid()

    # -- construction ---------------------------------------------------------

    @classmethod
    def solved(cls, config: BoardConfig) -> PuzzleState:
        """Return the solved layout of *config* with its first gap selected."""
        config.validate()
        pieces: list[Piece] = []

        for i, (x, y) in enumerate(sorted(config.large_pieces, key=lambda c: (c[1], c[0]))):
            pieces.append(Piece(f"B{i}", Role.LARGE, x, y, x, y))

        covered = config.large_cells()
        small_idx = 0
        gap_idx = 0
        for y in range(config.height):
            for x in range(config.width):
                if (x, y) in covered:
                    continue
                if (x, y) in config.gap_identities:
                    pieces.append(Piece(f"G{gap_idx}", Role.GAP, x, y, x, y))
                    gap_idx += 1
                else:
                    pieces.append(Piece(f"S{small_idx}", Role.SMALL, x, y, x, y))
                    small_idx += 1

        first_gap = next((p for p in pieces if p.is_gap), None)
        if first_gap is not None:
            first_gap.selected = True
        return cls(config, pieces)

    # -- grid maintenance -----------------------------------------------------

    def rebuild_grid(self) -> None:
        """Recompute every grid entry from piece positions."""
        width = self.config.width
        grid: list[GridCell | None] = [None] * self.config.cell_count
        for piece in self.pieces:
            for x, y in piece.cells():
                grid[y * width + x] = GridCell(piece.id, x - piece.x, y - piece.y)
        self.grid = grid

    def apply_cell_update(self, pieces: Iterable[Piece]) -> None:
        """Patch only the cells now covered by *pieces*.

        Callers pass every piece whose position changed; together their
        footprints must cover every cell that changed owner.
        """
        width = self.config.width
        for piece in pieces:
            for x, y in piece.cells():
                self.grid[y * width + x] = GridCell(piece.id, x - piece.x, y - piece.y)

    # -- queries --------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def in_bounds(self, x: int, y: int) -> bool:
        return self.config.in_bounds(x, y)

    def piece(self, piece_id: str) -> Piece:
        return self._by_id[piece_id]

    def find(self, piece_id: str) -> Piece | None:
        """Like :meth:`piece`, but ``None`` for an unknown id."""
        return self._by_id.get(piece_id)

    def cell(self, x: int, y: int) -> GridCell:
        entry = self.grid[y * self.config.width + x]
        if entry is None:
            raise LookupError(f"Grid cell ({x}, {y}) is unoccupied.")
        return entry

    def piece_at(self, x: int, y: int) -> Piece:
        return self._by_id[self.cell(x, y).piece_id]

    @property
    def gaps(self) -> list[Piece]:
        """Gap pieces in their fixed piece order."""
        return [p for p in self.pieces if p.is_gap]

    @property
    def selected_gap(self) -> Piece | None:
        return next((p for p in self.pieces if p.is_gap and p.selected), None)

    def select(self, gap: Piece) -> None:
        for p in self.pieces:
            p.selected = p is gap

    # -- snapshots ------------------------------------------------------------

    def positions(self) -> tuple[tuple[str, Role, int, int], ...]:
        return tuple((p.id, p.role, p.x, p.y) for p in self.pieces)

    def grid_snapshot(self) -> tuple[GridCell | None, ...]:
        return tuple(self.grid)

    def check_consistency(self) -> None:
        """Raise ``AssertionError`` unless the grid exactly mirrors the pieces."""
        seen: dict[Cell, str] = {}
        for piece in self.pieces:
            for x, y in piece.cells():
                if not self.in_bounds(x, y):
                    raise AssertionError(f"{piece.id} covers ({x}, {y}) outside the board.")
                if (x, y) in seen:
                    raise AssertionError(
                        f"{piece.id} and {seen[(x, y)]} both cover ({x}, {y})."
                    )
                seen[(x, y)] = piece.id
                entry = self.grid[y * self.width + x]
                expected = GridCell(piece.id, x - piece.x, y - piece.y)
                if entry != expected:
                    raise AssertionError(f"Grid at ({x}, {y}) is {entry}, expected {expected}.")
        if len(seen) != self.config.cell_count:
            raise AssertionError(
                f"Pieces cover {len(seen)} of {self.config.cell_count} cells."
            )
        if sum(p.selected for p in self.pieces) > 1:
            raise AssertionError("More than one piece is selected.")

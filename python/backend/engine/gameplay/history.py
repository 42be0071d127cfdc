"""Undo/redo stacks of applied moves."""

from __future__ import annotations

from backend.models.move import Move


class MoveHistory:
    """Undo replays a move's inverse, so no board snapshots are stored."""

    def __init__(self) -> None:
        self._done: list[Move] = []
        self._undone: list[Move] = []

    def record(self, move: Move) -> None:
        self._done.append(move)
        self._undone.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._done)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    def pop_undo(self) -> Move | None:
        """Take the last move off the undo stack; the caller applies its inverse."""
        if not self._done:
            return None
        move = self._done.pop()
        self._undone.append(move)
        return move

    def pop_redo(self) -> Move | None:
        if not self._undone:
            return None
        move = self._undone.pop()
        self._done.append(move)
        return move

    def clear(self) -> None:
        self._done.clear()
        self._undone.clear()

    def __len__(self) -> int:
        return len(self._done)

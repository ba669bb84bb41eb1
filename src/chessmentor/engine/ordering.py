"""Move ordering for alpha-beta: hash move, promotions, captures, killers, history."""

from __future__ import annotations

from collections.abc import Sequence

from chessmentor.core.enums import Color, MoveFlag, PieceType
from chessmentor.core.move import Move
from chessmentor.core.position import Position
from chessmentor.engine.evaluation import PIECE_VALUES

_HASH_MOVE_BONUS = 1_000_000
_PROMOTION_BONUS = 200_000
_CAPTURE_BONUS = 100_000
_KILLER_BONUSES = (90_000, 80_000)
_CASTLE_BONUS = 120
# History scores stay below the killer bonuses.
_HISTORY_CAP = 60_000
_MAX_PLY = 64


def is_noisy(position: Position, move: Move) -> bool:
    """Captures (en passant included) and promotions."""
    if move.flag in (MoveFlag.EN_PASSANT, MoveFlag.PROMOTION):
        return True
    return position.board[move.to_sq] is not None


class MoveOrderer:
    """Per-search ordering state. Call :meth:`reset` before each new search."""

    __slots__ = ("_killers", "_history")

    def __init__(self) -> None:
        self._killers: list[list[Move | None]] = []
        self._history: dict[tuple[Color, int, int], int] = {}
        self.reset()

    def reset(self) -> None:
        self._killers = [[None, None] for _ in range(_MAX_PLY)]
        self._history.clear()

    def order(
        self,
        position: Position,
        moves: Sequence[Move],
        *,
        hash_move: Move | None = None,
        ply: int = 0,
    ) -> list[Move]:
        killers = self._killers[ply] if ply < _MAX_PLY else [None, None]
        side = position.side_to_move
        board = position.board

        def priority(move: Move) -> int:
            if move == hash_move:
                return _HASH_MOVE_BONUS
            score = _CASTLE_BONUS if move.flag.is_castle else 0
            if move.promotion is not None:
                score += _PROMOTION_BONUS + PIECE_VALUES[move.promotion]
            victim = board[move.to_sq]
            if victim is not None:
                # MVV-LVA: most valuable victim, then least valuable attacker.
                attacker = board[move.from_sq]
                attacker_value = PIECE_VALUES[attacker.piece_type] if attacker else 0
                gain = 10 * PIECE_VALUES[victim.piece_type] - attacker_value
                return score + _CAPTURE_BONUS + gain
            if move.flag == MoveFlag.EN_PASSANT:
                return score + _CAPTURE_BONUS + 9 * PIECE_VALUES[PieceType.PAWN]
            if move.promotion is not None:
                return score
            for slot, killer in enumerate(killers):
                if move == killer:
                    return score + _KILLER_BONUSES[slot]
            return score + self._history.get((side, move.from_sq, move.to_sq), 0)

        return sorted(moves, key=priority, reverse=True)

    def record_cutoff(self, side: Color, move: Move, depth: int, ply: int) -> None:
        """Remember a quiet move that refuted the opponent's last move."""
        if ply < _MAX_PLY:
            slot = self._killers[ply]
            if slot[0] != move:
                slot[1], slot[0] = slot[0], move
        key = (side, move.from_sq, move.to_sq)
        self._history[key] = min(_HISTORY_CAP, self._history.get(key, 0) + depth * depth * 32)

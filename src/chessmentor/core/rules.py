"""High-level chess rules: check, checkmate, stalemate and draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessmentor.core.enums import Color, DrawReason, GameResult, PieceType
from chessmentor.core.move_generator import MoveGenerator
from chessmentor.core.types import is_light_square

if TYPE_CHECKING:
    from chessmentor.core.position import Position, PositionStatus

_MINORS = (PieceType.KNIGHT, PieceType.BISHOP)
_HEAVY_OR_PAWN = (PieceType.PAWN, PieceType.ROOK, PieceType.QUEEN)


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Draw policy: the fifty-move rule, insufficient material and threefold
    repetition all end the game automatically; there is no claim step.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return MoveGenerator(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return Rules.is_in_check(position) and not position.legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return not Rules.is_in_check(position) and not position.legal_moves()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K v K, K+minor v K, K+B v K+B with bishops on same-colored squares."""
        board = position.board
        minors: list[tuple[Color, PieceType, int]] = []
        for sq, piece in board.occupied():
            if piece.piece_type in _HEAVY_OR_PAWN:
                return False
            if piece.piece_type in _MINORS:
                minors.append((piece.color, piece.piece_type, sq))

        if len(minors) <= 1:
            return True
        if len(minors) == 2:
            (c1, t1, s1), (c2, t2, s2) = minors
            return (
                c1 != c2
                and t1 == t2 == PieceType.BISHOP
                and is_light_square(s1) == is_light_square(s2)
            )
        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def is_threefold_repetition(position: Position) -> bool:
        return position.repetition_count() >= 3

    @staticmethod
    def draw_reason(position: Position) -> DrawReason | None:
        """Rule-based draw in force for *position*, ignoring mate/stalemate."""
        if Rules.is_insufficient_material(position):
            return DrawReason.INSUFFICIENT_MATERIAL
        if Rules.is_threefold_repetition(position):
            return DrawReason.THREEFOLD_REPETITION
        if Rules.is_fifty_move_rule(position):
            return DrawReason.FIFTY_MOVE_RULE
        return None

    @staticmethod
    def status(position: Position) -> PositionStatus:
        """Compute every terminal flag at once; checkmate outranks draw rules."""
        from chessmentor.core.position import PositionStatus

        in_check = Rules.is_in_check(position)
        has_moves = bool(position.legal_moves())
        checkmate = in_check and not has_moves
        stalemate = not in_check and not has_moves
        reason = None if checkmate or stalemate else Rules.draw_reason(position)
        return PositionStatus(
            in_check=in_check,
            checkmate=checkmate,
            stalemate=stalemate,
            draw_reason=reason,
        )

    @staticmethod
    def game_result(position: Position) -> GameResult:
        return position.result

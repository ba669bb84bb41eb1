"""Zobrist keys identifying positions for repetition detection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from chessmentor.core.enums import CastlingRights, Color, PieceType
from chessmentor.core.types import Square, file_of

if TYPE_CHECKING:
    from chessmentor.core.board import Board

_SEED: Final = 0x5C4E55A1D0C7B0A7
_MASK_64: Final = 0xFFFFFFFFFFFFFFFF


def _splitmix64(state: int) -> int:
    z = (state + 0x9E3779B97F4A7C15) & _MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return z ^ (z >> 31)


_PIECE_KEYS: Final = tuple(
    tuple(
        tuple(_splitmix64(_SEED + color * 384 + ptype * 64 + sq) for sq in range(64))
        for ptype in range(6)
    )
    for color in range(2)
)
_BLACK_TO_MOVE_KEY: Final = _splitmix64(_SEED + 768)
_CASTLING_KEYS: Final = tuple(_splitmix64(_SEED + 769 + idx) for idx in range(16))
_EN_PASSANT_KEYS: Final = tuple(_splitmix64(_SEED + 785 + idx) for idx in range(64))


def position_key(
    board: Board,
    side_to_move: Color,
    castling: CastlingRights,
    en_passant: Square | None,
) -> int:
    """64-bit key over placement, side to move, castling rights and a usable ep target."""
    key = _CASTLING_KEYS[int(castling) & 0xF]
    if side_to_move == Color.BLACK:
        key ^= _BLACK_TO_MOVE_KEY
    if en_passant is not None and _can_capture_en_passant(board, side_to_move, en_passant):
        key ^= _EN_PASSANT_KEYS[en_passant]
    for sq, piece in board.occupied():
        key ^= _PIECE_KEYS[int(piece.color)][int(piece.piece_type) - 1][sq]
    return key


def _can_capture_en_passant(board: Board, side_to_move: Color, target: Square) -> bool:
    """Whether a pawn of *side_to_move* stands beside the pawn that just double-pushed."""
    pushed = target - 8 if side_to_move == Color.WHITE else target + 8
    for delta in (-1, 1):
        sq = pushed + delta
        if file_of(sq) != file_of(pushed) + delta:
            continue
        piece = board[sq]
        if (
            piece is not None
            and piece.color == side_to_move
            and piece.piece_type == PieceType.PAWN
        ):
            return True
    return False

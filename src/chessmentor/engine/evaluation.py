"""Static position evaluation in centipawns.

Scores are white-positive. Every term is computed per color with the same
rank-relative tables, so ``evaluate(pos.mirror()) == -evaluate(pos)``.
"""

from __future__ import annotations

import math

from chessmentor.core.board import Board
from chessmentor.core.enums import Color, PieceType
from chessmentor.core.move_generator import attack_mask
from chessmentor.core.position import Position
from chessmentor.core.types import Square, file_of, relative_rank

PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 0,
}

# Piece-square tables from White's point of view, rank 8 first.
_PST_PAWN = (
      0,   0,   0,   0,   0,   0,   0,   0,
     50,  50,  50,  50,  50,  50,  50,  50,
     10,  10,  20,  30,  30,  20,  10,  10,
      5,   5,  10,  25,  25,  10,   5,   5,
      0,   0,   0,  20,  20,   0,   0,   0,
      5,  -5, -10,   0,   0, -10,  -5,   5,
      5,  10,  10, -20, -20,  10,  10,   5,
      0,   0,   0,   0,   0,   0,   0,   0,
)  # fmt: skip
_PST_KNIGHT = (
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20,   0,   0,   0,   0, -20, -40,
    -30,   0,  10,  15,  15,  10,   0, -30,
    -30,   5,  15,  20,  20,  15,   5, -30,
    -30,   0,  15,  20,  20,  15,   0, -30,
    -30,   5,  10,  15,  15,  10,   5, -30,
    -40, -20,   0,   5,   5,   0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
)  # fmt: skip
_PST_BISHOP = (
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,  10,  10,   5,   0, -10,
    -10,   5,   5,  10,  10,   5,   5, -10,
    -10,   0,  10,  10,  10,  10,   0, -10,
    -10,  10,  10,  10,  10,  10,  10, -10,
    -10,   5,   0,   0,   0,   0,   5, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
)  # fmt: skip
_PST_ROOK = (
      0,   0,   0,   0,   0,   0,   0,   0,
      5,  10,  10,  10,  10,  10,  10,   5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
      0,   0,   0,   5,   5,   0,   0,   0,
)  # fmt: skip
_PST_QUEEN = (
    -20, -10, -10,  -5,  -5, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,   5,   5,   5,   0, -10,
     -5,   0,   5,   5,   5,   5,   0,  -5,
      0,   0,   5,   5,   5,   5,   0,  -5,
    -10,   5,   5,   5,   5,   5,   0, -10,
    -10,   0,   5,   0,   0,   0,   0, -10,
    -20, -10, -10,  -5,  -5, -10, -10, -20,
)  # fmt: skip
_PST_KING_MIDDLE = (
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -10, -20, -20, -20, -20, -20, -20, -10,
     20,  20,   0,   0,   0,   0,  20,  20,
     20,  30,  10,   0,   0,  10,  30,  20,
)  # fmt: skip
_PST_KING_END = (
    -50, -40, -30, -20, -20, -30, -40, -50,
    -30, -20, -10,   0,   0, -10, -20, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -30,   0,   0,   0,   0, -30, -30,
    -50, -30, -30, -30, -30, -30, -30, -50,
)  # fmt: skip

_PST: dict[PieceType, tuple[int, ...]] = {
    PieceType.PAWN: _PST_PAWN,
    PieceType.KNIGHT: _PST_KNIGHT,
    PieceType.BISHOP: _PST_BISHOP,
    PieceType.ROOK: _PST_ROOK,
    PieceType.QUEEN: _PST_QUEEN,
}

_MOBILITY_WEIGHTS: dict[PieceType, int] = {
    PieceType.KNIGHT: 4,
    PieceType.BISHOP: 5,
    PieceType.ROOK: 2,
    PieceType.QUEEN: 1,
}

_DOUBLED_PAWN_PENALTY = 15
_ISOLATED_PAWN_PENALTY = 12
_PASSED_PAWN_BONUS = (0, 5, 10, 20, 35, 60, 100, 0)
_SHIELD_NEAR_BONUS = 10
_SHIELD_FAR_BONUS = 5
_OPEN_KING_FILE_PENALTY = 20
_EXPOSED_KING_PENALTY = 30

# Non-pawn material (both sides) at or below which kings head for the centre.
_ENDGAME_MATERIAL = 1300


def _table_index(sq: Square, color: Color) -> int:
    # Tables are laid out rank 8 first from White's side; a black piece reads
    # the row of its relative rank.
    return (7 - relative_rank(sq, color)) * 8 + file_of(sq)


def _pawn_files(board: Board, color: Color) -> list[int]:
    counts = [0] * 8
    for sq in board.pieces(color, PieceType.PAWN):
        counts[file_of(sq)] += 1
    return counts


def _non_pawn_material(board: Board) -> int:
    total = 0
    for _, piece in board.occupied():
        if piece.piece_type not in (PieceType.PAWN, PieceType.KING):
            total += PIECE_VALUES[piece.piece_type]
    return total


def _material_and_placement(board: Board, color: Color, endgame: bool) -> int:
    score = 0
    king_table = _PST_KING_END if endgame else _PST_KING_MIDDLE
    for sq, piece in board.occupied():
        if piece.color != color:
            continue
        table = _PST.get(piece.piece_type, king_table)
        score += PIECE_VALUES[piece.piece_type] + table[_table_index(sq, color)]
    return score


def _pawn_structure(board: Board, color: Color) -> int:
    own_files = _pawn_files(board, color)
    enemy_pawns = board.pieces(color.opposite, PieceType.PAWN)
    score = 0

    for count in own_files:
        if count > 1:
            score -= _DOUBLED_PAWN_PENALTY * (count - 1)

    for sq in board.pieces(color, PieceType.PAWN):
        file = file_of(sq)
        left = own_files[file - 1] if file > 0 else 0
        right = own_files[file + 1] if file < 7 else 0
        if left == 0 and right == 0:
            score -= _ISOLATED_PAWN_PENALTY

        my_rank = relative_rank(sq, color)
        blocked = any(
            abs(file_of(enemy) - file) <= 1
            and relative_rank(enemy, color) > my_rank
            for enemy in enemy_pawns
        )
        if not blocked:
            score += _PASSED_PAWN_BONUS[my_rank]
    return score


def _king_safety(board: Board, color: Color) -> int:
    king_sq = board.king_square(color)
    king_file = file_of(king_sq)
    king_rank = relative_rank(king_sq, color)
    enemy_has_queen = board.count(color.opposite, PieceType.QUEEN) > 0
    score = 0

    # Shield only counts for a king tucked away on a wing of its back rank.
    if king_rank == 0 and king_file not in (3, 4):
        for sq in board.pieces(color, PieceType.PAWN):
            if abs(file_of(sq) - king_file) > 1:
                continue
            pawn_rank = relative_rank(sq, color)
            if pawn_rank == 1:
                score += _SHIELD_NEAR_BONUS
            elif pawn_rank == 2:
                score += _SHIELD_FAR_BONUS

    if enemy_has_queen:
        if _pawn_files(board, color)[king_file] == 0:
            score -= _OPEN_KING_FILE_PENALTY
        if king_rank >= 2:
            score -= _EXPOSED_KING_PENALTY
    return score


def _mobility(board: Board, color: Color) -> int:
    own = board.color_bitboard(color)
    score = 0
    for sq, piece in board.occupied():
        weight = _MOBILITY_WEIGHTS.get(piece.piece_type)
        if piece.color != color or weight is None:
            continue
        reachable = attack_mask(board, sq, piece) & ~own
        score += weight * reachable.bit_count()
    return score


def _side_score(board: Board, color: Color, endgame: bool) -> int:
    return (
        _material_and_placement(board, color, endgame)
        + _pawn_structure(board, color)
        + _king_safety(board, color)
        + _mobility(board, color)
    )


def evaluate(position: Position) -> int:
    """Centipawn score of *position*; positive favours White."""
    board = position.board
    endgame = _non_pawn_material(board) <= _ENDGAME_MATERIAL
    return _side_score(board, Color.WHITE, endgame) - _side_score(
        board, Color.BLACK, endgame
    )


def evaluate_for_side(position: Position) -> int:
    """Centipawn score from the side to move's point of view."""
    score = evaluate(position)
    return score if position.side_to_move == Color.WHITE else -score


def evaluation_bar_value(centipawns: int) -> float:
    """Map a white-positive score onto ``[-1, 1]`` for an evaluation bar."""
    return math.tanh(centipawns / 1000)


def describe_evaluation(centipawns: int) -> str:
    pawns = centipawns / 100
    leader = "White" if pawns > 0 else "Black"
    magnitude = abs(pawns)
    if magnitude < 0.3:
        return "Equal position"
    if magnitude < 1:
        return f"Slight {leader.lower()} advantage"
    if magnitude < 2:
        return f"{leader} is better"
    if magnitude < 5:
        return f"{leader} has a winning advantage"
    return f"{leader} is winning"

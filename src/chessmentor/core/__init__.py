"""Core domain layer: pure chess rules with no external dependencies.

Quick start::

    from chessmentor.core import Position, parse_square

    pos = Position.initial()
    pos = pos.play(parse_square("e2"), parse_square("e4"))
    print(pos.side_to_move, pos.en_passant, pos.legal_moves()[:3])
"""

from chessmentor.core.board import Board
from chessmentor.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    PieceType,
)
from chessmentor.core.errors import InvalidMove, InvalidPosition, NoLegalMove
from chessmentor.core.move import Move, MoveRecord
from chessmentor.core.move_generator import MoveGenerator
from chessmentor.core.notation import (
    STARTING_FEN,
    history_to_san,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from chessmentor.core.piece import Piece
from chessmentor.core.position import Position, PositionStatus
from chessmentor.core.rules import Rules
from chessmentor.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Errors
    "InvalidMove",
    "InvalidPosition",
    "NoLegalMove",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "Position",
    "PositionStatus",
    "Rules",
    # Notation
    "STARTING_FEN",
    "history_to_san",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]

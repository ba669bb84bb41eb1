"""Notation package: FEN / SAN codecs and PGN-like transcripts."""

from chessmentor.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessmentor.core.notation.pgn import (
    build_pgn,
    pgn_movetext_from_sans,
    pgn_result_token,
)
from chessmentor.core.notation.san import history_to_san, move_to_san, parse_san

__all__ = [
    "STARTING_FEN",
    "build_pgn",
    "history_to_san",
    "move_to_san",
    "parse_san",
    "pgn_movetext_from_sans",
    "pgn_result_token",
    "position_from_fen",
    "position_to_fen",
]

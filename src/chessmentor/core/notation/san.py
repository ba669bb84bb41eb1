"""SAN (Standard Algebraic Notation) encoding and decoding."""

from __future__ import annotations

import re

from chessmentor.core.enums import MoveFlag, PieceType
from chessmentor.core.errors import InvalidMove
from chessmentor.core.move import Move
from chessmentor.core.position import Position
from chessmentor.core.types import FILE_NAMES, file_of, parse_square, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}

_SAN_RE = re.compile(
    r"^(?P<piece>[NBRQK])?(?P<file>[a-h])?(?P<rank>[1-8])?(?P<capture>x)?"
    r"(?P<to>[a-h][1-8])(?:=?(?P<promo>[NBRQ]))?$"
)


def move_to_san(position: Position, move: Move) -> str:
    """Render a legal *move* in SAN given the *position* before it."""
    after = position.apply_move(move)

    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        board = position.board
        piece = board[move.from_sq]
        assert piece is not None
        is_capture = board[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT

        if piece.piece_type == PieceType.PAWN:
            san = FILE_NAMES[file_of(move.from_sq)] if is_capture else ""
        else:
            san = _SAN_PIECE[piece.piece_type] + _disambiguation(position, move)

        if is_capture:
            san += "x"
        san += square_name(move.to_sq)
        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    if after.is_checkmate:
        san += "#"
    elif after.in_check:
        san += "+"
    return san


def _disambiguation(position: Position, move: Move) -> str:
    board = position.board
    moving_type = board[move.from_sq].piece_type  # type: ignore[union-attr]
    rivals = [
        m.from_sq
        for m in position.legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and board[m.from_sq].piece_type == moving_type  # type: ignore[union-attr]
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return FILE_NAMES[file_of(move.from_sq)]
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return str(rank_of(move.from_sq) + 1)
    return square_name(move.from_sq)


def history_to_san(position: Position) -> list[str]:
    """SAN of every move in *position*'s history, replayed from its start."""
    sans: list[str] = []
    current = position.start
    for record in position.history:
        sans.append(move_to_san(current, record.move))
        current = current.apply_move(record.move)
    return sans


def parse_san(position: Position, san: str) -> Move:
    """Resolve a SAN string to the matching legal move in *position*."""
    clean = san.strip().rstrip("+#!?")
    legal = position.legal_moves()

    if clean in ("O-O", "0-0", "O-O-O", "0-0-0"):
        flag = MoveFlag.CASTLE_KINGSIDE if len(clean) == 3 else MoveFlag.CASTLE_QUEENSIDE
        for m in legal:
            if m.flag == flag:
                return m
        raise InvalidMove(f"Illegal move: {san}")

    match = _SAN_RE.match(clean)
    if match is None:
        raise InvalidMove(f"Unparseable SAN: {san!r}")

    piece_type = _SAN_PIECE_REV.get(match["piece"] or "", PieceType.PAWN)
    to_sq = parse_square(match["to"])
    promotion = _SAN_PIECE_REV[match["promo"]] if match["promo"] else None
    from_file = FILE_NAMES.index(match["file"]) if match["file"] else None
    from_rank = int(match["rank"]) - 1 if match["rank"] else None

    candidates = [
        m
        for m in legal
        if m.to_sq == to_sq
        and m.promotion == promotion
        and position.board[m.from_sq].piece_type == piece_type  # type: ignore[union-attr]
        and (from_file is None or file_of(m.from_sq) == from_file)
        and (from_rank is None or rank_of(m.from_sq) == from_rank)
    ]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise InvalidMove(f"Illegal move: {san}")
    raise InvalidMove(f"Ambiguous move: {san}")

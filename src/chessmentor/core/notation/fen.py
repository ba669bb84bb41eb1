"""FEN serialization and parsing."""

from __future__ import annotations

from chessmentor.core.board import Board
from chessmentor.core.enums import CastlingRights, Color
from chessmentor.core.errors import InvalidPosition
from chessmentor.core.piece import Piece
from chessmentor.core.position import Position
from chessmentor.core.types import Square, make_square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def position_to_fen(pos: Position) -> str:
    """Serialise *pos* into the six standard FEN fields."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        row = ""
        empty = 0
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)

    castling = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)
    ep = square_name(pos.en_passant) if pos.en_passant is not None else "-"
    return " ".join(
        (
            "/".join(rows),
            pos.side_to_move.fen_char,
            castling or "-",
            ep,
            str(pos.halfmove_clock),
            str(pos.fullmove_number),
        )
    )


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string (4–6 fields) into a :class:`Position`."""
    parts = fen.split()
    if not 4 <= len(parts) <= 6:
        raise InvalidPosition(f"Invalid FEN (need 4-6 fields): {fen!r}")
    placement, side_part, castling_part, ep_part = parts[:4]

    board = _parse_placement(placement, fen)

    if side_part not in ("w", "b"):
        raise InvalidPosition(f"Invalid FEN side-to-move field: {side_part!r}")
    side = Color.WHITE if side_part == "w" else Color.BLACK

    castling = CastlingRights.NONE
    if castling_part != "-":
        lookup = dict(_CASTLING_CHARS)
        if len(set(castling_part)) != len(castling_part):
            raise InvalidPosition(f"Invalid FEN castling field: {castling_part!r}")
        for ch in castling_part:
            if ch not in lookup:
                raise InvalidPosition(f"Invalid FEN castling field: {castling_part!r}")
            castling |= lookup[ch]

    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError as exc:
            raise InvalidPosition(str(exc)) from exc

    try:
        halfmove = int(parts[4]) if len(parts) > 4 else 0
        fullmove = int(parts[5]) if len(parts) > 5 else 1
    except ValueError as exc:
        raise InvalidPosition(f"Invalid FEN clock fields: {fen!r}") from exc

    return Position(board, side, castling, ep, halfmove, fullmove)


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidPosition(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for idx, rank_text in enumerate(ranks):
        rank = 7 - idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                if not 1 <= int(ch) <= 8:
                    raise InvalidPosition(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += int(ch)
            else:
                if file >= 8:
                    raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
                try:
                    board[make_square(file, rank)] = Piece.from_char(ch)
                except ValueError as exc:
                    raise InvalidPosition(str(exc)) from exc
                file += 1
        if file != 8:
            raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
    return board

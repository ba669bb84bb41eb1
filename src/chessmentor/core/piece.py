"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessmentor.core.enums import Color, PieceType

_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
_TYPES_BY_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}

_UNICODE_WHITE = "♙♘♗♖♕♔"
_UNICODE_BLACK = "♟♞♝♜♛♚"


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable (color, piece type) pair."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = _LETTERS[self.piece_type]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create a piece from its FEN character, e.g. 'N' → white knight."""
        ptype = _TYPES_BY_LETTER.get(char.lower())
        if ptype is None or len(char) != 1:
            raise ValueError(f"Invalid piece character: {char!r}")
        return cls(Color.WHITE if char.isupper() else Color.BLACK, ptype)

    @property
    def symbol(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        table = _UNICODE_WHITE if self.color == Color.WHITE else _UNICODE_BLACK
        return table[int(self.piece_type) - 1]

    def recolored(self) -> Piece:
        return Piece(self.color.opposite, self.piece_type)

"""Move value objects: candidate moves and applied-move records."""

from __future__ import annotations

from dataclasses import dataclass

from chessmentor.core.enums import MoveFlag, PieceType
from chessmentor.core.piece import Piece
from chessmentor.core.types import Square, parse_square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """A candidate move as produced by the generator (UCI-like)."""

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    def __str__(self) -> str:
        return self.uci

    @property
    def uci(self) -> str:
        """Long-algebraic notation, e.g. ``e7e8q``."""
        text = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            text += _PROMO_CHARS[self.promotion]
        return text

    @staticmethod
    def parse_uci(text: str) -> tuple[Square, Square, PieceType | None]:
        """Split ``e7e8q`` into (from, to, promotion); flags need a position."""
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid UCI move: {text!r}")
        promotion = None
        if len(text) == 5:
            promotion = _PROMO_TYPES.get(text[4])
            if promotion is None:
                raise ValueError(f"Invalid UCI promotion: {text!r}")
        return parse_square(text[:2]), parse_square(text[2:4]), promotion


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A move as it was applied to a position; one history entry."""

    move: Move
    piece: Piece
    captured: Piece | None = None
    gives_check: bool = False

    @property
    def from_sq(self) -> Square:
        return self.move.from_sq

    @property
    def to_sq(self) -> Square:
        return self.move.to_sq

    @property
    def flag(self) -> MoveFlag:
        return self.move.flag

    @property
    def promotion(self) -> PieceType | None:
        return self.move.promotion

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def resets_halfmove_clock(self) -> bool:
        return self.captured is not None or self.piece.piece_type == PieceType.PAWN

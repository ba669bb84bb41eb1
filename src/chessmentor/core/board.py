"""Board - piece placement on an 8x8 grid.

A :class:`Board` is mutable, but every board owned by a
:class:`~chessmentor.core.position.Position` is private to it and never
changed after construction; move simulation always works on a copy.
"""

from __future__ import annotations

from collections.abc import Iterator

from chessmentor.core.enums import Color, PieceType
from chessmentor.core.piece import Piece
from chessmentor.core.types import Square, make_square, mirror_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Yield the square index of every set bit, lowest first."""
    while bitboard:
        lsb = bitboard & -bitboard
        yield lsb.bit_length() - 1
        bitboard ^= lsb


class Board:
    """64-square board with per-color and per-piece bitboard indexes."""

    __slots__ = ("_squares", "_piece_bitboards", "_color_bitboards")

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64
        # [color][piece_type - 1] -> bitboard
        self._piece_bitboards: list[list[int]] = [[0] * 6 for _ in range(2)]
        self._color_bitboards: list[int] = [0, 0]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        mask = 1 << sq
        old = self._squares[sq]
        if old is not None:
            self._piece_bitboards[old.color][old.piece_type - 1] &= ~mask
            self._color_bitboards[old.color] &= ~mask
        self._squares[sq] = piece
        if piece is not None:
            self._piece_bitboards[piece.color][piece.piece_type - 1] |= mask
            self._color_bitboards[piece.color] |= mask

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Queries ------------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._piece_bitboards[color][piece_type - 1]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        return list(iter_bits(self.pieces_bitboard(color, piece_type)))

    def color_bitboard(self, color: Color) -> int:
        return self._color_bitboards[color]

    def occupancy(self) -> int:
        return self._color_bitboards[0] | self._color_bitboards[1]

    def count(self, color: Color, piece_type: PieceType) -> int:
        return self.pieces_bitboard(color, piece_type).bit_count()

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """(square, piece) pairs for every occupied square, a1 first."""
        for sq in iter_bits(self.occupancy()):
            piece = self._squares[sq]
            assert piece is not None
            yield sq, piece

    def king_square(self, color: Color) -> Square:
        bitboard = self.pieces_bitboard(color, PieceType.KING)
        if not bitboard:
            raise ValueError(f"No {color} king on board")
        return (bitboard & -bitboard).bit_length() - 1

    # -- Copying / transforms -----------------------------------------------

    def copy(self) -> Board:
        b = Board.__new__(Board)
        b._squares = self._squares.copy()
        b._piece_bitboards = [row.copy() for row in self._piece_bitboards]
        b._color_bitboards = self._color_bitboards.copy()
        return b

    def mirrored(self) -> Board:
        """Board flipped top-to-bottom with colors swapped."""
        b = Board()
        for sq, piece in self.occupied():
            b[mirror_square(sq)] = piece.recolored()
        return b

    @classmethod
    def initial(cls) -> Board:
        """Standard starting placement."""
        b = cls()
        for file, ptype in enumerate(_BACK_RANK):
            b[make_square(file, 0)] = Piece(Color.WHITE, ptype)
            b[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            b[make_square(file, 7)] = Piece(Color.BLACK, ptype)
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __hash__(self) -> int:
        return hash(tuple(self._squares))

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            cells = [str(self[make_square(f, rank)] or ".") for f in range(8)]
            rows.append(f"{rank + 1} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

"""Pseudo-legal move generation, attack detection and the legality filter.

Legality is decided in exactly one place, :meth:`MoveGenerator.leaves_king_safe`:
the candidate is played on a private scratch board and the mover's king is
tested against the opponent's attacks. Pins, discovered checks, en-passant
exposures and check evasion all fall out of that test.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessmentor.core.board import Board, iter_bits
from chessmentor.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessmentor.core.move import Move
from chessmentor.core.piece import Piece
from chessmentor.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessmentor.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1),
)
KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1),
)
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


# -- Precomputed lookup tables ---------------------------------------------


def _step_masks(offsets: tuple[tuple[int, int], ...]) -> tuple[int, ...]:
    masks: list[int] = []
    for sq in range(64):
        mask = 0
        for df, dr in offsets:
            f, r = file_of(sq) + df, rank_of(sq) + dr
            if 0 <= f < 8 and 0 <= r < 8:
                mask |= 1 << make_square(f, r)
        masks.append(mask)
    return tuple(masks)


def _rays(dirs: tuple[tuple[int, int], ...]) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    table: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        rays: list[tuple[Square, ...]] = []
        for df, dr in dirs:
            f, r = file_of(sq) + df, rank_of(sq) + dr
            ray: list[Square] = []
            while 0 <= f < 8 and 0 <= r < 8:
                ray.append(make_square(f, r))
                f += df
                r += dr
            rays.append(tuple(ray))
        table.append(tuple(rays))
    return tuple(table)


KNIGHT_MASKS = _step_masks(KNIGHT_OFFSETS)
KING_MASKS = _step_masks(KING_OFFSETS)
# Squares a pawn of the given color on sq attacks.
PAWN_ATTACK_MASKS: tuple[tuple[int, ...], tuple[int, ...]] = (
    _step_masks(((-1, 1), (1, 1))),
    _step_masks(((-1, -1), (1, -1))),
)
BISHOP_RAYS = _rays(BISHOP_DIRS)
ROOK_RAYS = _rays(ROOK_DIRS)
QUEEN_RAYS = _rays(QUEEN_DIRS)

_SLIDER_RAYS = {
    PieceType.BISHOP: BISHOP_RAYS,
    PieceType.ROOK: ROOK_RAYS,
    PieceType.QUEEN: QUEEN_RAYS,
}


# -- Board-level primitives ---------------------------------------------------


def _slider_mask(board: Board, rays: tuple[tuple[Square, ...], ...]) -> int:
    mask = 0
    for ray in rays:
        for to_sq in ray:
            mask |= 1 << to_sq
            if not board.is_empty(to_sq):
                break
    return mask


def attack_mask(board: Board, sq: Square, piece: Piece) -> int:
    """Bitboard of squares attacked by *piece* standing on *sq*."""
    ptype = piece.piece_type
    if ptype == PieceType.PAWN:
        return PAWN_ATTACK_MASKS[piece.color][sq]
    if ptype == PieceType.KNIGHT:
        return KNIGHT_MASKS[sq]
    if ptype == PieceType.KING:
        return KING_MASKS[sq]
    return _slider_mask(board, _SLIDER_RAYS[ptype][sq])


def _ray_hits(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    attackers: tuple[PieceType, PieceType],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in attackers:
                return True
            break
    return False


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color* on *board*?"""
    # A pawn of by_color attacks sq iff a pawn of the other color on sq
    # would attack the pawn's square.
    if board.pieces_bitboard(by_color, PieceType.PAWN) & PAWN_ATTACK_MASKS[
        by_color.opposite
    ][sq]:
        return True
    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & KNIGHT_MASKS[sq]:
        return True
    if board.pieces_bitboard(by_color, PieceType.KING) & KING_MASKS[sq]:
        return True

    queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
    if (queens or board.pieces_bitboard(by_color, PieceType.BISHOP)) and _ray_hits(
        board, BISHOP_RAYS[sq], by_color, (PieceType.BISHOP, PieceType.QUEEN)
    ):
        return True
    if (queens or board.pieces_bitboard(by_color, PieceType.ROOK)) and _ray_hits(
        board, ROOK_RAYS[sq], by_color, (PieceType.ROOK, PieceType.QUEEN)
    ):
        return True
    return False


def en_passant_victim_square(move: Move) -> Square:
    """Square of the pawn removed by an en-passant capture."""
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


def play_on_board(board: Board, move: Move) -> Piece | None:
    """Move pieces on *board* in place; return the captured piece, if any.

    Only the placement changes. Side to move, rights and clocks are the
    caller's business.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {move.from_sq}")

    if move.flag == MoveFlag.EN_PASSANT:
        victim_sq = en_passant_victim_square(move)
        captured = board[victim_sq]
        board[victim_sq] = None
    else:
        captured = board[move.to_sq]

    board[move.from_sq] = None
    if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
        board[move.to_sq] = Piece(piece.color, move.promotion)
    else:
        board[move.to_sq] = piece

    if move.flag.is_castle:
        rank = rank_of(move.from_sq)
        if move.flag == MoveFlag.CASTLE_KINGSIDE:
            rook_from, rook_to = make_square(7, rank), make_square(5, rank)
        else:
            rook_from, rook_to = make_square(0, rank), make_square(3, rank)
        board[rook_to] = board[rook_from]
        board[rook_from] = None

    return captured


# -- Generator ----------------------------------------------------------------


class MoveGenerator:
    """Generates moves for a :class:`Position` without ever mutating it."""

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return [m for m in self.generate_pseudo_legal_moves() if self.leaves_king_safe(m)]

    def has_legal_move(self) -> bool:
        return any(self.leaves_king_safe(m) for m in self.generate_pseudo_legal_moves())

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves whose origin is *sq* (empty if not the mover's piece)."""
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        moves: list[Move] = []
        self._gen_piece(sq, piece, moves)
        return [m for m in moves if self.leaves_king_safe(m)]

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave the mover's king in check)."""
        color = self._pos.side_to_move
        moves: list[Move] = []
        for sq in iter_bits(self._board.color_bitboard(color)):
            piece = self._board[sq]
            assert piece is not None
            self._gen_piece(sq, piece, moves)
        return moves

    def leaves_king_safe(self, move: Move) -> bool:
        """Simulate *move* on a scratch board; is the mover's king safe after it?"""
        mover = self._pos.side_to_move
        scratch = self._board.copy()
        play_on_board(scratch, move)
        return not is_square_attacked(scratch, scratch.king_square(mover), mover.opposite)

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return is_square_attacked(
            self._board, self._board.king_square(color), color.opposite
        )

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return is_square_attacked(self._board, sq, by_color)

    # -- Piece-specific generators -----------------------------------------

    def _gen_piece(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif ptype == PieceType.KNIGHT:
            self._gen_steps(sq, piece.color, KNIGHT_MASKS[sq], moves)
        elif ptype == PieceType.KING:
            self._gen_steps(sq, piece.color, KING_MASKS[sq], moves)
            self._gen_castling(sq, piece.color, moves)
        else:
            self._gen_sliding(sq, piece.color, _SLIDER_RAYS[ptype][sq], moves)

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step = 8 if color == Color.WHITE else -8
        start_rank = 1 if color == Color.WHITE else 6
        last_rank = 7 if color == Color.WHITE else 0

        def add(to_sq: Square, flag: MoveFlag = MoveFlag.NORMAL) -> None:
            if rank_of(to_sq) == last_rank:
                for ptype in PROMOTION_TYPES:
                    moves.append(Move(sq, to_sq, MoveFlag.PROMOTION, ptype))
            else:
                moves.append(Move(sq, to_sq, flag))

        one_step = sq + step
        if board.is_empty(one_step):
            add(one_step)
            two_step = one_step + step
            if rank_of(sq) == start_rank and board.is_empty(two_step):
                moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for to_sq in iter_bits(PAWN_ATTACK_MASKS[color][sq]):
            target = board[to_sq]
            if target is not None:
                if target.color != color:
                    add(to_sq)
            elif to_sq == self._pos.en_passant:
                moves.append(Move(sq, to_sq, MoveFlag.EN_PASSANT))

    def _gen_steps(self, sq: Square, color: Color, mask: int, moves: list[Move]) -> None:
        own = self._board.color_bitboard(color)
        for to_sq in iter_bits(mask & ~own):
            moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        rights = self._pos.castling
        if not rights & CastlingRights.both(color):
            return
        home = 0 if color == Color.WHITE else 56
        if king_sq != home + 4 or self.is_in_check(color):
            return

        board = self._board
        opponent = color.opposite
        rook = Piece(color, PieceType.ROOK)

        if (
            rights & CastlingRights.kingside(color)
            and board[home + 7] == rook
            and board.is_empty(home + 5)
            and board.is_empty(home + 6)
            and not self.is_square_attacked(home + 5, opponent)
            and not self.is_square_attacked(home + 6, opponent)
        ):
            moves.append(Move(king_sq, home + 6, MoveFlag.CASTLE_KINGSIDE))

        if (
            rights & CastlingRights.queenside(color)
            and board[home] == rook
            and board.is_empty(home + 1)
            and board.is_empty(home + 2)
            and board.is_empty(home + 3)
            and not self.is_square_attacked(home + 2, opponent)
            and not self.is_square_attacked(home + 3, opponent)
        ):
            moves.append(Move(king_sq, home + 2, MoveFlag.CASTLE_QUEENSIDE))

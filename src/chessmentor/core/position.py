"""Position: immutable game-state snapshot with derived status flags.

Every transition (:meth:`Position.apply_move`, :meth:`Position.play`) returns a
new :class:`Position`; none is ever changed in place. Status flags
(check, checkmate, stalemate, draw) are derived from the position itself and
computed on first access.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chessmentor.core.board import Board
from chessmentor.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    PieceType,
)
from chessmentor.core.errors import InvalidMove, InvalidPosition
from chessmentor.core.move import Move, MoveRecord
from chessmentor.core.move_generator import (
    MoveGenerator,
    is_square_attacked,
    play_on_board,
)
from chessmentor.core.types import (
    Square,
    file_of,
    is_valid_square,
    make_square,
    mirror_square,
    rank_of,
    square_name,
)
from chessmentor.core.zobrist import position_key

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}
_BACK_RANKS_MASK = 0xFF | (0xFF << 56)


@dataclass(frozen=True, slots=True)
class PositionStatus:
    """Terminal-state flags of a position."""

    in_check: bool
    checkmate: bool
    stalemate: bool
    draw_reason: DrawReason | None

    @property
    def draw(self) -> bool:
        return self.draw_reason is not None


class Position:
    """Full chess position: placement, side to move, rights, clocks, history."""

    __slots__ = (
        "_board",
        "_side_to_move",
        "_castling",
        "_en_passant",
        "_halfmove_clock",
        "_fullmove_number",
        "_history",
        "_keys",
        "_start",
        "_legal",
        "_status",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        board = board.copy() if board is not None else Board.initial()
        _validate(board, side_to_move, en_passant, halfmove_clock, fullmove_number)
        self._init(
            board,
            side_to_move,
            castling,
            en_passant,
            halfmove_clock,
            fullmove_number,
            history=(),
            keys=(),
            start=None,
        )

    def _init(
        self,
        board: Board,
        side_to_move: Color,
        castling: CastlingRights,
        en_passant: Square | None,
        halfmove_clock: int,
        fullmove_number: int,
        *,
        history: tuple[MoveRecord, ...],
        keys: tuple[int, ...],
        start: Position | None,
    ) -> None:
        self._board = board
        self._side_to_move = side_to_move
        self._castling = castling
        self._en_passant = en_passant
        self._halfmove_clock = halfmove_clock
        self._fullmove_number = fullmove_number
        self._history = history
        self._keys = keys + (position_key(board, side_to_move, castling, en_passant),)
        self._start = start
        self._legal: tuple[Move, ...] | None = None
        self._status: PositionStatus | None = None

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position."""
        return cls()

    # ── Read-only state ──────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        return self._board

    @property
    def side_to_move(self) -> Color:
        return self._side_to_move

    @property
    def castling(self) -> CastlingRights:
        return self._castling

    @property
    def en_passant(self) -> Square | None:
        return self._en_passant

    @property
    def halfmove_clock(self) -> int:
        return self._halfmove_clock

    @property
    def fullmove_number(self) -> int:
        return self._fullmove_number

    @property
    def history(self) -> tuple[MoveRecord, ...]:
        """Records of every move applied since :attr:`start`, oldest first."""
        return self._history

    @property
    def start(self) -> Position:
        """The position this game line started from."""
        return self._start if self._start is not None else self

    @property
    def last_move(self) -> MoveRecord | None:
        return self._history[-1] if self._history else None

    @property
    def key(self) -> int:
        """Zobrist key of placement, side, castling rights and ep target."""
        return self._keys[-1]

    def repetition_count(self) -> int:
        """How often the current key occurred since the last irreversible move."""
        return self._keys.count(self._keys[-1])

    # ── Moves ────────────────────────────────────────────────────────────

    def legal_moves(self) -> tuple[Move, ...]:
        """Legal moves for the side to move (computed once per position)."""
        if self._legal is None:
            self._legal = tuple(MoveGenerator(self).generate_legal_moves())
        return self._legal

    def legal_destinations(self, from_sq: Square) -> list[Square]:
        """Distinct destination squares reachable from *from_sq*."""
        seen: list[Square] = []
        for move in self.legal_moves():
            if move.from_sq == from_sq and move.to_sq not in seen:
                seen.append(move.to_sq)
        return seen

    def find_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Move:
        """Resolve an origin/destination pair to the matching legal move.

        A promotion without an explicit choice resolves to a queen.
        """
        if not (is_valid_square(from_sq) and is_valid_square(to_sq)):
            raise InvalidMove(f"Square index out of range: {from_sq}, {to_sq}")
        candidates = [
            m for m in self.legal_moves() if m.from_sq == from_sq and m.to_sq == to_sq
        ]
        if candidates and candidates[0].flag == MoveFlag.PROMOTION:
            wanted = promotion or PieceType.QUEEN
            candidates = [m for m in candidates if m.promotion == wanted]
        elif promotion is not None:
            candidates = []
        if not candidates:
            raise InvalidMove(
                f"Illegal move {square_name(from_sq)}{square_name(to_sq)} "
                f"for {self._side_to_move}"
            )
        return candidates[0]

    def play(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> Position:
        """Apply the legal move *from_sq* → *to_sq* and return the new position."""
        return self._apply(self.find_move(from_sq, to_sq, promotion))

    def apply_move(self, move: Move) -> Position:
        """Apply a legal *move* and return the resulting position."""
        if move not in self.legal_moves():
            raise InvalidMove(f"Illegal move {move} for {self._side_to_move}")
        return self._apply(move)

    def _apply(self, move: Move) -> Position:
        mover = self._side_to_move
        board = self._board.copy()
        piece = board[move.from_sq]
        assert piece is not None
        captured = play_on_board(board, move)

        castling = self._castling
        if piece.piece_type == PieceType.KING:
            castling &= ~CastlingRights.both(mover)
        for sq in (move.from_sq, move.to_sq):
            corner_right = _ROOK_CORNERS.get(sq)
            if corner_right is not None:
                castling &= ~corner_right

        en_passant: Square | None = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            en_passant = (move.from_sq + move.to_sq) // 2

        record = MoveRecord(
            move=move,
            piece=piece,
            captured=captured,
            gives_check=is_square_attacked(
                board, board.king_square(mover.opposite), mover
            ),
        )
        irreversible = record.resets_halfmove_clock

        child = Position.__new__(Position)
        child._init(
            board,
            mover.opposite,
            castling,
            en_passant,
            0 if irreversible else self._halfmove_clock + 1,
            self._fullmove_number + (1 if mover == Color.BLACK else 0),
            history=self._history + (record,),
            keys=() if irreversible else self._keys,
            start=self.start,
        )
        return child

    # ── Derived status ───────────────────────────────────────────────────

    @property
    def status(self) -> PositionStatus:
        if self._status is None:
            from chessmentor.core.rules import Rules

            self._status = Rules.status(self)
        return self._status

    @property
    def in_check(self) -> bool:
        return self.status.in_check

    @property
    def is_checkmate(self) -> bool:
        return self.status.checkmate

    @property
    def is_stalemate(self) -> bool:
        return self.status.stalemate

    @property
    def is_draw(self) -> bool:
        return self.status.draw

    @property
    def draw_reason(self) -> DrawReason | None:
        return self.status.draw_reason

    @property
    def is_game_over(self) -> bool:
        status = self.status
        return status.checkmate or status.stalemate or status.draw

    @property
    def result(self) -> GameResult:
        if self.is_checkmate:
            return (
                GameResult.BLACK_WINS
                if self._side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if self.is_stalemate or self.is_draw:
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    # ── Transforms / serialisation ───────────────────────────────────────

    def mirror(self) -> Position:
        """Position with the board flipped vertically and colors swapped."""
        ep = mirror_square(self._en_passant) if self._en_passant is not None else None
        return Position(
            self._board.mirrored(),
            self._side_to_move.opposite,
            self._castling.mirrored(),
            ep,
            self._halfmove_clock,
            self._fullmove_number,
        )

    def to_snapshot(self) -> dict[str, Any]:
        """JSON-serialisable record of this position and its move history."""
        from chessmentor.core.notation import history_to_san, position_to_fen

        return {
            "fen": position_to_fen(self),
            "start_fen": position_to_fen(self.start),
            "board": [
                [str(self._board[make_square(f, r)] or "") for f in range(8)]
                for r in range(7, -1, -1)
            ],
            "turn": self._side_to_move.fen_char,
            "castling": int(self._castling),
            "en_passant": self._en_passant,
            "halfmove_clock": self._halfmove_clock,
            "fullmove_number": self._fullmove_number,
            "moves": [record.move.uci for record in self._history],
            "san": history_to_san(self),
        }

    @classmethod
    def from_snapshot(cls, snapshot: dict[str, Any]) -> Position:
        """Rebuild a position from :meth:`to_snapshot` output by replaying moves."""
        from chessmentor.core.notation import position_from_fen, position_to_fen

        try:
            position = position_from_fen(snapshot["start_fen"])
            for uci in snapshot.get("moves", []):
                from_sq, to_sq, promotion = Move.parse_uci(uci)
                position = position.play(from_sq, to_sq, promotion)
            expected = snapshot["fen"]
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidPosition(f"Malformed position snapshot: {exc}") from exc
        if position_to_fen(position) != expected:
            raise InvalidPosition("Snapshot moves do not lead to the recorded position")
        return position

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self._board == other._board
            and self._side_to_move == other._side_to_move
            and self._castling == other._castling
            and self._en_passant == other._en_passant
            and self._halfmove_clock == other._halfmove_clock
            and self._fullmove_number == other._fullmove_number
        )

    def __hash__(self) -> int:
        return hash((self.key, self._halfmove_clock, self._fullmove_number))

    def __repr__(self) -> str:
        from chessmentor.core.notation import position_to_fen

        return f"Position({position_to_fen(self)!r})"


def _validate(
    board: Board,
    side_to_move: Color,
    en_passant: Square | None,
    halfmove_clock: int,
    fullmove_number: int,
) -> None:
    for color in Color:
        kings = board.count(color, PieceType.KING)
        if kings != 1:
            raise InvalidPosition(f"Expected exactly one {color} king, found {kings}")
        if board.pieces_bitboard(color, PieceType.PAWN) & _BACK_RANKS_MASK:
            raise InvalidPosition(f"{color} pawn on the first or last rank")
    if is_square_attacked(
        board, board.king_square(side_to_move.opposite), side_to_move
    ):
        raise InvalidPosition("The side not to move is in check")
    if en_passant is not None:
        expected_rank = 5 if side_to_move == Color.WHITE else 2
        if rank_of(en_passant) != expected_rank:
            raise InvalidPosition(f"Invalid en-passant square {en_passant}")
        pusher = side_to_move.opposite
        pawn_sq = make_square(file_of(en_passant), 4 if pusher == Color.BLACK else 3)
        pawn = board[pawn_sq]
        if pawn is None or pawn.piece_type != PieceType.PAWN or pawn.color != pusher:
            raise InvalidPosition(f"No pawn behind en-passant square {en_passant}")
    if halfmove_clock < 0 or fullmove_number < 1:
        raise InvalidPosition("Negative halfmove clock or non-positive fullmove number")

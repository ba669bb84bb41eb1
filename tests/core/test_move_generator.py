"""Perft tests: the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from chessmentor.core.enums import MoveFlag, PieceType
from chessmentor.core.move_generator import MoveGenerator
from chessmentor.core.notation import STARTING_FEN, position_from_fen
from chessmentor.core.position import Position
from chessmentor.core.types import E1, E5, F6, G1, parse_square


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* by applying moves to immutable positions."""
    moves = position.legal_moves()
    if depth == 1:
        return len(moves)
    return sum(perft(position.apply_move(move), depth - 1) for move in moves)


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 2) == 400

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(position_from_fen(STARTING_FEN), 3) == 8_902


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 1) == 48

    @pytest.mark.slow
    def test_depth_2(self) -> None:
        assert perft(position_from_fen(KIWIPETE), 2) == 2_039


class TestPerftOtherPositions:
    def test_position_3(self) -> None:
        pos = position_from_fen("8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1")
        assert perft(pos, 1) == 14
        assert perft(pos, 2) == 191

    def test_position_4(self) -> None:
        pos = position_from_fen(
            "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"
        )
        assert perft(pos, 1) == 6
        assert perft(pos, 2) == 264


# ── Special moves ────────────────────────────────────────────────────────────


class TestSpecialMoves:
    def test_castling_generated_when_path_clear(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        flags = {m.flag for m in pos.legal_moves() if m.from_sq == E1}
        assert MoveFlag.CASTLE_KINGSIDE in flags
        assert MoveFlag.CASTLE_QUEENSIDE in flags

    def test_no_castling_through_attacked_square(self) -> None:
        # Black rook on f8 covers f1
        pos = position_from_fen("4kr2/8/8/8/8/8/8/4K2R w K - 0 1")
        flags = {m.flag for m in pos.legal_moves()}
        assert MoveFlag.CASTLE_KINGSIDE not in flags

    def test_no_castling_out_of_check(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/8/4K2R w K - 0 1")
        assert all(not m.flag.is_castle for m in pos.legal_moves())

    def test_en_passant_available(self) -> None:
        pos = position_from_fen("4k3/8/8/4Pp2/8/8/8/4K3 w - f6 0 1")
        ep = [m for m in pos.legal_moves() if m.flag == MoveFlag.EN_PASSANT]
        assert len(ep) == 1
        assert ep[0].from_sq == E5 and ep[0].to_sq == F6

    def test_promotion_offers_four_pieces(self) -> None:
        pos = position_from_fen("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        promos = {m.promotion for m in pos.legal_moves() if m.flag == MoveFlag.PROMOTION}
        assert promos == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }

    def test_pinned_piece_cannot_leave_line(self) -> None:
        # White knight on e2 pinned by the rook on e8
        pos = position_from_fen("4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
        knight_moves = MoveGenerator(pos).legal_moves_from(parse_square("e2"))
        assert knight_moves == []

    def test_has_legal_move(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert MoveGenerator(pos).has_legal_move()
        assert G1 in {m.from_sq for m in pos.legal_moves()}

"""Tests for the static evaluator."""

import pytest

from chessmentor.core.enums import PieceType
from chessmentor.core.notation import position_from_fen
from chessmentor.core.position import Position
from chessmentor.engine.evaluation import (
    PIECE_VALUES,
    describe_evaluation,
    evaluate,
    evaluate_for_side,
    evaluation_bar_value,
)

POSITIONS = [
    "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
    "rnbqkb1r/pp1p1ppp/4pn2/2p5/2PP4/2N5/PP2PPPP/R1BQKBNR w KQkq - 0 4",
    "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
    "6k1/5ppp/8/8/8/8/5PPP/3Q2K1 b - - 0 1",
]


class TestEvaluate:
    def test_start_position_is_balanced(self) -> None:
        assert evaluate(Position.initial()) == 0

    @pytest.mark.parametrize("fen", POSITIONS)
    def test_color_symmetry(self, fen: str) -> None:
        pos = position_from_fen(fen)
        assert evaluate(pos.mirror()) == -evaluate(pos)

    def test_extra_queen_is_winning(self) -> None:
        pos = position_from_fen("6k1/5ppp/8/8/8/8/5PPP/3Q2K1 w - - 0 1")
        assert evaluate(pos) > PIECE_VALUES[PieceType.QUEEN] // 2

    def test_side_relative_score(self) -> None:
        white = position_from_fen("6k1/5ppp/8/8/8/8/5PPP/3Q2K1 w - - 0 1")
        black = position_from_fen("6k1/5ppp/8/8/8/8/5PPP/3Q2K1 b - - 0 1")
        assert evaluate_for_side(white) == evaluate(white)
        assert evaluate_for_side(black) == -evaluate(black)

    def test_passed_pawn_bonus(self) -> None:
        passed = position_from_fen("4k3/7p/3P4/8/8/8/8/4K3 w - - 0 1")
        blocked = position_from_fen("4k3/4p3/3P4/8/8/8/8/4K3 w - - 0 1")
        assert evaluate(passed) > evaluate(blocked)

    def test_doubled_pawns_penalised(self) -> None:
        healthy = position_from_fen("4k3/8/8/8/8/8/3PP3/4K3 w - - 0 1")
        doubled = position_from_fen("4k3/8/8/8/8/3P4/3P4/4K3 w - - 0 1")
        assert evaluate(healthy) > evaluate(doubled)


class TestPresentation:
    def test_bar_is_bounded(self) -> None:
        assert evaluation_bar_value(0) == 0.0
        assert 0.99 < evaluation_bar_value(100_000) <= 1.0
        assert -1.0 <= evaluation_bar_value(-100_000) < -0.99

    def test_bar_is_monotonic(self) -> None:
        assert evaluation_bar_value(100) < evaluation_bar_value(300)

    @pytest.mark.parametrize(
        ("cp", "text"),
        [
            (0, "Equal position"),
            (-25, "Equal position"),
            (50, "Slight white advantage"),
            (-50, "Slight black advantage"),
            (150, "White is better"),
            (-300, "Black has a winning advantage"),
            (900, "White is winning"),
        ],
    )
    def test_describe(self, cp: int, text: str) -> None:
        assert describe_evaluation(cp) == text

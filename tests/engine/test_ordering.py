"""Tests for alpha-beta move ordering."""

from chessmentor.core.enums import Color
from chessmentor.core.move import Move
from chessmentor.core.notation import position_from_fen
from chessmentor.core.position import Position
from chessmentor.engine.ordering import MoveOrderer, is_noisy

HANGING_QUEEN = "4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1"
PROMOTION = "8/P7/8/8/8/8/8/k6K w - - 0 1"
EN_PASSANT = "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1"


def _find(position: Position, uci: str) -> Move:
    return next(m for m in position.legal_moves() if m.uci == uci)


class TestIsNoisy:
    def test_capture(self) -> None:
        pos = position_from_fen(HANGING_QUEEN)
        assert is_noisy(pos, _find(pos, "d1d5"))

    def test_quiet_move(self) -> None:
        pos = Position.initial()
        assert not is_noisy(pos, _find(pos, "g1f3"))

    def test_en_passant(self) -> None:
        pos = position_from_fen(EN_PASSANT)
        assert is_noisy(pos, _find(pos, "e5d6"))

    def test_promotion(self) -> None:
        pos = position_from_fen(PROMOTION)
        assert is_noisy(pos, _find(pos, "a7a8q"))


class TestOrder:
    def test_capture_comes_first(self) -> None:
        pos = position_from_fen(HANGING_QUEEN)
        ordered = MoveOrderer().order(pos, pos.legal_moves())
        assert ordered[0].uci == "d1d5"

    def test_hash_move_beats_capture(self) -> None:
        pos = position_from_fen(HANGING_QUEEN)
        quiet = _find(pos, "e1f1")
        ordered = MoveOrderer().order(pos, pos.legal_moves(), hash_move=quiet)
        assert ordered[0] == quiet
        assert ordered[1].uci == "d1d5"

    def test_queen_promotion_first(self) -> None:
        pos = position_from_fen(PROMOTION)
        ordered = MoveOrderer().order(pos, pos.legal_moves())
        assert ordered[0].uci == "a7a8q"

    def test_keeps_every_move(self) -> None:
        pos = Position.initial()
        ordered = MoveOrderer().order(pos, pos.legal_moves())
        assert sorted(m.uci for m in ordered) == sorted(m.uci for m in pos.legal_moves())


class TestCutoffs:
    def test_killer_is_tried_first_at_its_ply(self) -> None:
        pos = Position.initial()
        orderer = MoveOrderer()
        killer = _find(pos, "b1c3")
        orderer.record_cutoff(Color.WHITE, killer, depth=1, ply=2)
        assert orderer.order(pos, pos.legal_moves(), ply=2)[0] == killer

    def test_history_applies_at_other_plies(self) -> None:
        pos = Position.initial()
        orderer = MoveOrderer()
        move = _find(pos, "d2d4")
        orderer.record_cutoff(Color.WHITE, move, depth=4, ply=3)
        assert orderer.order(pos, pos.legal_moves(), ply=7)[0] == move

    def test_history_is_per_side(self) -> None:
        pos = Position.initial()
        orderer = MoveOrderer()
        move = _find(pos, "d2d4")
        orderer.record_cutoff(Color.BLACK, move, depth=4, ply=3)
        ordered = orderer.order(pos, pos.legal_moves(), ply=7)
        assert ordered == list(pos.legal_moves())

    def test_reset_forgets_cutoffs(self) -> None:
        pos = Position.initial()
        orderer = MoveOrderer()
        orderer.record_cutoff(Color.WHITE, _find(pos, "d2d4"), depth=4, ply=0)
        orderer.reset()
        assert orderer.order(pos, pos.legal_moves()) == list(pos.legal_moves())

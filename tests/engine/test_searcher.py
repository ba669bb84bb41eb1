"""Tests for the pure-Python search engine."""

from chessmentor.core.notation import position_from_fen
from chessmentor.core.position import Position
from chessmentor.engine.search import MATE_SCORE, SearchLimits, is_mate_score
from chessmentor.engine.searcher import PythonSearchEngine

BACK_RANK_MATE = "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1"
HANGING_QUEEN = "4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1"


class TestSearch:
    def test_returns_legal_move_from_start(self) -> None:
        pos = Position.initial()
        result = PythonSearchEngine().search(pos, SearchLimits(max_depth=2))
        assert result.best_move in pos.legal_moves()
        assert result.depth == 2
        assert result.nodes > 0

    def test_finds_mate_in_one(self) -> None:
        pos = position_from_fen(BACK_RANK_MATE)
        result = PythonSearchEngine().search(pos, SearchLimits(max_depth=3))
        assert result.best_move is not None
        assert result.best_move.uci == "a1a8"
        assert is_mate_score(result.score_cp)
        assert result.score_cp == MATE_SCORE - 1

    def test_captures_hanging_queen(self) -> None:
        pos = position_from_fen(HANGING_QUEEN)
        result = PythonSearchEngine().search(pos, SearchLimits(max_depth=2))
        assert result.best_move is not None
        assert result.best_move.uci == "d1d5"

    def test_terminal_position_has_no_move(self) -> None:
        pos = position_from_fen("R5k1/5ppp/8/8/8/8/8/6K1 b - - 0 1")
        result = PythonSearchEngine().search(pos, SearchLimits(max_depth=2))
        assert result.best_move is None
        assert result.score_cp == -MATE_SCORE

    def test_stalemate_scores_zero(self) -> None:
        pos = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        result = PythonSearchEngine().search(pos, SearchLimits(max_depth=2))
        assert result.best_move is None
        assert result.score_cp == 0

    def test_cancelled_search_still_returns_a_move(self) -> None:
        pos = Position.initial()
        result = PythonSearchEngine().search(
            pos, SearchLimits(max_depth=4), is_cancelled=lambda: True
        )
        assert result.best_move in pos.legal_moves()
        assert result.depth == 0

    def test_time_limit_keeps_first_iteration(self) -> None:
        pos = Position.initial()
        result = PythonSearchEngine().search(
            pos, SearchLimits(max_depth=6, time_limit_ms=1)
        )
        assert result.best_move in pos.legal_moves()
        assert result.depth >= 1

    def test_engine_is_reusable(self) -> None:
        engine = PythonSearchEngine()
        first = engine.search(position_from_fen(HANGING_QUEEN), SearchLimits(max_depth=2))
        second = engine.search(position_from_fen(HANGING_QUEEN), SearchLimits(max_depth=2))
        assert first.best_move == second.best_move
        assert first.score_cp == second.score_cp


class TestRankMoves:
    def test_ranks_every_legal_move(self) -> None:
        pos = position_from_fen(BACK_RANK_MATE)
        result = PythonSearchEngine().rank_moves(pos, SearchLimits(max_depth=2))
        assert len(result.ranked) == len(pos.legal_moves())
        assert {r.move for r in result.ranked} == set(pos.legal_moves())

    def test_sorted_best_first(self) -> None:
        pos = position_from_fen(HANGING_QUEEN)
        result = PythonSearchEngine().rank_moves(pos, SearchLimits(max_depth=2))
        scores = [r.score_cp for r in result.ranked]
        assert scores == sorted(scores, reverse=True)
        assert result.ranked[0].move.uci == "d1d5"
        assert result.best_move == result.ranked[0].move

    def test_mate_ranked_first(self) -> None:
        pos = position_from_fen(BACK_RANK_MATE)
        result = PythonSearchEngine().rank_moves(pos, SearchLimits(max_depth=2))
        assert result.ranked[0].move.uci == "a1a8"
        assert not is_mate_score(result.ranked[1].score_cp)

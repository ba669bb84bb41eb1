"""Move grading based on the built-in search engine and static evaluator."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import replace

from chessmentor.analysis.models import GradeSummary, MoveEvaluation, MoveGrade
from chessmentor.core.errors import InvalidMove, NoLegalMove
from chessmentor.core.move import Move
from chessmentor.core.notation import move_to_san
from chessmentor.core.position import Position
from chessmentor.engine.evaluation import evaluate_for_side
from chessmentor.engine.search import MATE_SCORE, CancelCheck, IEngine, SearchLimits
from chessmentor.engine.searcher import PythonSearchEngine

_LOGGER = logging.getLogger(__name__)

_BRILLIANT_MAX_DELTA = -200
_EXCELLENT_MAX_DELTA = -50
_GOOD_MAX_DELTA = 0
_INACCURACY_MAX_DELTA = 50
_MISTAKE_MAX_DELTA = 150

DEFAULT_GRADING_DEPTH = 2


def grade_for_delta(delta_cp: int) -> MoveGrade:
    """Classify a signed centipawn delta (best minus played)."""
    if delta_cp <= _BRILLIANT_MAX_DELTA:
        return MoveGrade.BRILLIANT
    if delta_cp <= _EXCELLENT_MAX_DELTA:
        return MoveGrade.EXCELLENT
    if delta_cp <= _GOOD_MAX_DELTA:
        return MoveGrade.GOOD
    if delta_cp <= _INACCURACY_MAX_DELTA:
        return MoveGrade.INACCURACY
    if delta_cp <= _MISTAKE_MAX_DELTA:
        return MoveGrade.MISTAKE
    return MoveGrade.BLUNDER


def _grades(items: Iterable[MoveEvaluation | MoveGrade]) -> list[MoveGrade]:
    return [item if isinstance(item, MoveGrade) else item.grade for item in items]


def calculate_accuracy(evaluations: Iterable[MoveEvaluation | MoveGrade]) -> int:
    """Mean per-grade accuracy score, rounded; 100 when nothing was graded."""
    grades = _grades(evaluations)
    if not grades:
        return 100
    return round(sum(g.accuracy_score for g in grades) / len(grades))


def blunder_fraction(evaluations: Iterable[MoveEvaluation | MoveGrade]) -> float:
    grades = _grades(evaluations)
    if not grades:
        return 0.0
    return grades.count(MoveGrade.BLUNDER) / len(grades)


def summarize(evaluations: Iterable[MoveEvaluation]) -> GradeSummary:
    items = list(evaluations)
    counts = Counter(e.grade for e in items)
    avg = sum(e.centipawn_loss for e in items) / len(items) if items else 0.0
    return GradeSummary(
        moves=len(items),
        accuracy=calculate_accuracy(items),
        avg_cp_loss=avg,
        brilliant=counts[MoveGrade.BRILLIANT],
        excellent=counts[MoveGrade.EXCELLENT],
        good=counts[MoveGrade.GOOD],
        inaccuracies=counts[MoveGrade.INACCURACY],
        mistakes=counts[MoveGrade.MISTAKE],
        blunders=counts[MoveGrade.BLUNDER],
    )


class MoveGrader:
    """Grades a played move against the engine's reference best move.

    Every root move is scored by the same full-window search, from the
    mover's side. The grade comes from the signed gap between the reference
    move's score and the played move's score; the stored centipawn loss is
    that gap floored at zero.
    """

    __slots__ = ("_engine", "_limits")

    def __init__(
        self,
        engine: IEngine | None = None,
        *,
        depth: int = DEFAULT_GRADING_DEPTH,
        time_limit_ms: int | None = None,
    ) -> None:
        if depth <= 0:
            raise ValueError("Grading depth must be >= 1")
        self._engine = engine or PythonSearchEngine()
        self._limits = SearchLimits(max_depth=depth, time_limit_ms=time_limit_ms)

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    def grade(
        self,
        position: Position,
        move: Move,
        is_cancelled: CancelCheck | None = None,
    ) -> MoveEvaluation:
        if not position.legal_moves():
            raise NoLegalMove("Cannot grade a move in a terminal position")
        if move not in position.legal_moves():
            raise InvalidMove(f"Illegal move {move} for {position.side_to_move}")

        result = self._engine.rank_moves(position, self._limits, is_cancelled)
        best_move = result.best_move
        played_san = move_to_san(position, move)

        if best_move is None or best_move == move:
            delta = 0
        else:
            scores = {entry.move: entry.score_cp for entry in result.ranked}
            best_cp = scores.get(best_move)
            if best_cp is None:
                best_cp = self._score_after(position, best_move, is_cancelled)
            played_cp = scores.get(move)
            if played_cp is None:
                played_cp = self._score_after(position, move, is_cancelled)
            delta = best_cp - played_cp

        grade = grade_for_delta(delta)
        evaluation = MoveEvaluation(
            color=position.side_to_move,
            played_move=move,
            played_san=played_san,
            grade=grade,
            centipawn_loss=max(0, delta),
            raw_delta=delta,
            best_move=best_move,
            best_san=move_to_san(position, best_move) if best_move else None,
        )
        _LOGGER.debug(
            "Graded %s as %s (delta %d, best %s)",
            played_san,
            grade,
            delta,
            evaluation.best_san,
        )
        return evaluation

    def _score_after(
        self,
        position: Position,
        move: Move,
        is_cancelled: CancelCheck | None,
    ) -> int:
        """Mover-side score of *move* for engines that rank only part of the root."""
        child = position.apply_move(move)
        if child.is_checkmate:
            return MATE_SCORE - 1
        if child.is_game_over:
            return 0
        if self._limits.max_depth == 1:
            return -evaluate_for_side(child)
        limits = replace(self._limits, max_depth=self._limits.max_depth - 1)
        return -self._engine.search(child, limits, is_cancelled).score_cp

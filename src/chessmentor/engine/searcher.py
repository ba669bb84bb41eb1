"""Pure-Python chess engine search (negamax + alpha-beta)."""

from __future__ import annotations

from enum import IntEnum
from operator import attrgetter
from time import perf_counter, sleep
from typing import NamedTuple

from chessmentor.core.move import Move
from chessmentor.core.position import Position
from chessmentor.core.rules import Rules
from chessmentor.engine.evaluation import evaluate_for_side
from chessmentor.engine.ordering import MoveOrderer, is_noisy
from chessmentor.engine.search import (
    MATE_SCORE,
    CancelCheck,
    IEngine,
    RankedMove,
    SearchLimits,
    SearchResult,
    is_mate_score,
)

_INFINITY = 1_000_000
_QUIESCENCE_MAX_DEPTH = 8
_YIELD_EVERY_NODES = 4096


class _Bound(IntEnum):
    EXACT = 0
    LOWER = 1
    UPPER = 2


class _TTEntry(NamedTuple):
    depth: int
    score: int
    bound: _Bound
    move: Move | None


class _SearchAborted(Exception):
    """Raised inside the tree when the caller cancels or time runs out."""


def _never_cancelled() -> bool:
    return False


def _is_rule_draw(position: Position) -> bool:
    return (
        Rules.is_fifty_move_rule(position)
        or Rules.is_threefold_repetition(position)
        or Rules.is_insufficient_material(position)
    )


class PythonSearchEngine(IEngine):
    """Classical chess searcher with iterative deepening and quiescence.

    :meth:`search` narrows the root window and only guarantees the best
    move's score; :meth:`rank_moves` searches every root move with a full
    window so the whole list is ordered by exact scores. An iteration that is
    interrupted is thrown away; the previous one stands.
    """

    __slots__ = (
        "_tt",
        "_tt_max_entries",
        "_orderer",
        "_nodes",
        "_next_yield",
        "_deadline",
        "_is_cancelled",
    )

    def __init__(self, tt_max_entries: int = 200_000) -> None:
        self._tt: dict[int, _TTEntry] = {}
        self._tt_max_entries = tt_max_entries
        self._orderer = MoveOrderer()
        self._nodes = 0
        self._next_yield = _YIELD_EVERY_NODES
        self._deadline: float | None = None
        self._is_cancelled: CancelCheck = _never_cancelled

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        return self._iterate(position, limits, is_cancelled, full_window=False)

    def rank_moves(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        """Score every legal root move, best first."""
        return self._iterate(position, limits, is_cancelled, full_window=True)

    # -- Iterative deepening ----------------------------------------------------

    def _iterate(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None,
        *,
        full_window: bool,
    ) -> SearchResult:
        if limits.max_depth < 1:
            raise ValueError("Search depth must be >= 1")

        self._tt.clear()
        self._orderer.reset()
        self._nodes = 0
        self._next_yield = _YIELD_EVERY_NODES
        self._is_cancelled = is_cancelled or _never_cancelled

        legal = position.legal_moves()
        if not legal:
            score = -MATE_SCORE if Rules.is_in_check(position) else 0
            return SearchResult(None, score, 0, 0)

        deadline = None
        if limits.time_limit_ms is not None:
            deadline = perf_counter() + max(limits.time_limit_ms, 1) / 1000.0

        root = self._orderer.order(position, legal)
        ranked: list[RankedMove] = []
        completed = 0
        for depth in range(1, limits.max_depth + 1):
            # No deadline on the first pass so there is always a scored move.
            self._deadline = deadline if depth > 1 else None
            try:
                ranked = self._search_root(position, root, depth, full_window)
            except _SearchAborted:
                break
            completed = depth
            root = [entry.move for entry in ranked]
            top = ranked[0].score_cp
            if not full_window and top > 0 and is_mate_score(top):
                break

        if not ranked:
            ranked = [RankedMove(move, 0) for move in root]
        return SearchResult(
            ranked[0].move,
            ranked[0].score_cp,
            completed,
            self._nodes,
            ranked=tuple(ranked),
        )

    def _search_root(
        self,
        position: Position,
        moves: list[Move],
        depth: int,
        full_window: bool,
    ) -> list[RankedMove]:
        alpha = -_INFINITY
        scored: list[RankedMove] = []
        for move in moves:
            lower = -_INFINITY if full_window else alpha
            child = position.apply_move(move)
            score = -self._negamax(child, depth - 1, -_INFINITY, -lower, 1)
            scored.append(RankedMove(move, score))
            alpha = max(alpha, score)
        # Stable: ties keep the previous iteration's order.
        scored.sort(key=attrgetter("score_cp"), reverse=True)
        return scored

    # -- Tree ---------------------------------------------------------------------

    def _negamax(self, position: Position, depth: int, alpha: int, beta: int, ply: int) -> int:
        self._tick()
        if _is_rule_draw(position):
            return 0
        if depth <= 0:
            return self._quiescence(position, alpha, beta, ply, 0)

        key = position.key
        entry = self._tt.get(key)
        if entry is not None and entry.depth >= depth:
            if entry.bound == _Bound.EXACT:
                return entry.score
            if entry.bound == _Bound.LOWER and entry.score >= beta:
                return entry.score
            if entry.bound == _Bound.UPPER and entry.score <= alpha:
                return entry.score

        moves = position.legal_moves()
        if not moves:
            return -MATE_SCORE + ply if Rules.is_in_check(position) else 0

        alpha_in = alpha
        best_score = -_INFINITY
        best_move: Move | None = None
        hash_move = entry.move if entry is not None else None
        for move in self._orderer.order(position, moves, hash_move=hash_move, ply=ply):
            child = position.apply_move(move)
            score = -self._negamax(child, depth - 1, -beta, -alpha, ply + 1)
            if score > best_score:
                best_score, best_move = score, move
                alpha = max(alpha, score)
            if alpha >= beta:
                if not is_noisy(position, move):
                    self._orderer.record_cutoff(position.side_to_move, move, depth, ply)
                break

        if best_score <= alpha_in:
            bound = _Bound.UPPER
        elif best_score >= beta:
            bound = _Bound.LOWER
        else:
            bound = _Bound.EXACT
        self._remember(key, _TTEntry(depth, best_score, bound, best_move))
        return best_score

    def _quiescence(
        self,
        position: Position,
        alpha: int,
        beta: int,
        ply: int,
        q_depth: int,
    ) -> int:
        self._tick()
        moves = position.legal_moves()
        in_check = Rules.is_in_check(position)
        if not moves:
            return -MATE_SCORE + ply if in_check else 0

        stand_pat = evaluate_for_side(position)
        if q_depth >= _QUIESCENCE_MAX_DEPTH:
            return stand_pat

        if in_check:
            candidates = list(moves)
        else:
            if stand_pat >= beta:
                return beta
            alpha = max(alpha, stand_pat)
            candidates = [m for m in moves if is_noisy(position, m)]

        for move in self._orderer.order(position, candidates, ply=ply):
            child = position.apply_move(move)
            score = -self._quiescence(child, -beta, -alpha, ply + 1, q_depth + 1)
            if score >= beta:
                return beta
            alpha = max(alpha, score)
        return alpha

    # -- Bookkeeping ------------------------------------------------------------

    def _tick(self) -> None:
        self._nodes += 1
        if self._nodes >= self._next_yield:
            self._next_yield = self._nodes + _YIELD_EVERY_NODES
            # Let a GUI thread run while searching off the main thread.
            sleep(0.001)
        if self._is_cancelled():
            raise _SearchAborted
        if self._deadline is not None and perf_counter() >= self._deadline:
            raise _SearchAborted

    def _remember(self, key: int, entry: _TTEntry) -> None:
        current = self._tt.get(key)
        if current is not None and current.depth > entry.depth:
            return
        if current is None and len(self._tt) >= self._tt_max_entries:
            self._tt.clear()
        self._tt[key] = entry

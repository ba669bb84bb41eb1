"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chessmentor.core.move import Move
    from chessmentor.core.position import Position

CancelCheck = Callable[[], bool]

MATE_SCORE = 100_000

# Per-move budget for the opponent and the grader.
DEFAULT_MOVE_TIME_MS = 900


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    max_depth: int = 3
    time_limit_ms: int | None = None


@dataclass(slots=True, frozen=True)
class RankedMove:
    """A root move with its search score from the mover's point of view."""

    move: Move
    score_cp: int


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_move: Move | None
    score_cp: int
    depth: int
    nodes: int
    ranked: tuple[RankedMove, ...] = ()


class IEngine(Protocol):
    """Protocol for chess engines used by the selector and the grader."""

    def search(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...

    def rank_moves(
        self,
        position: Position,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...


def is_mate_score(score_cp: int) -> bool:
    return abs(score_cp) >= MATE_SCORE - 1_000

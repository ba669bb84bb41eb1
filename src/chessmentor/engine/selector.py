"""Skill-limited move selection on top of the search engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import StrEnum

from chessmentor.core.errors import NoLegalMove
from chessmentor.core.move import Move
from chessmentor.core.position import Position
from chessmentor.engine.search import (
    DEFAULT_MOVE_TIME_MS,
    CancelCheck,
    IEngine,
    RankedMove,
    SearchLimits,
)
from chessmentor.engine.searcher import PythonSearchEngine

_LOGGER = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 10


@dataclass(slots=True, frozen=True)
class DifficultyProfile:
    """Static strength parameters of one difficulty level."""

    level: int
    target_elo: int
    search_depth: int
    error_rate: float
    blunder_rate: float


DIFFICULTY_LEVELS: dict[int, DifficultyProfile] = {
    p.level: p
    for p in (
        DifficultyProfile(1, 400, 1, 0.40, 0.15),
        DifficultyProfile(2, 600, 1, 0.35, 0.12),
        DifficultyProfile(3, 800, 2, 0.30, 0.10),
        DifficultyProfile(4, 1000, 2, 0.25, 0.08),
        DifficultyProfile(5, 1200, 3, 0.20, 0.06),
        DifficultyProfile(6, 1400, 3, 0.15, 0.04),
        DifficultyProfile(7, 1600, 4, 0.10, 0.02),
        DifficultyProfile(8, 1800, 4, 0.05, 0.01),
        DifficultyProfile(9, 2000, 5, 0.02, 0.005),
        DifficultyProfile(10, 2200, 5, 0.01, 0.002),
    )
}

# Used for a level outside the table.
DEFAULT_PROFILE = DIFFICULTY_LEVELS[4]


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, level))


def difficulty_profile(level: int) -> DifficultyProfile:
    return DIFFICULTY_LEVELS.get(level, DEFAULT_PROFILE)


class SelectionKind(StrEnum):
    """Which tier of the ranked list a selection was drawn from."""

    BEST = "best"
    ERROR = "error"
    BLUNDER = "blunder"


@dataclass(slots=True, frozen=True)
class Selection:
    move: Move
    score_cp: int
    kind: SelectionKind
    candidates: int


def split_tiers(
    ranked: tuple[RankedMove, ...],
) -> tuple[tuple[RankedMove, ...], tuple[RankedMove, ...]]:
    """Return ``(middle, bottom)`` tiers of a best-first ranking.

    The bottom tier is the lowest third (at least one move); the middle tier
    sits between the top move and the bottom tier. With too few moves for a
    middle tier, everything below the top move serves as both.
    """
    count = len(ranked)
    if count < 2:
        return ranked, ranked
    bottom_size = max(1, count // 3)
    bottom = ranked[count - bottom_size :]
    middle = ranked[1 : count - bottom_size] or ranked[1:]
    return middle, bottom


class AIMoveSelector:
    """Pick the opponent's move for a difficulty level.

    All randomness comes from the injected ``rng`` so games are reproducible
    under a seeded :class:`random.Random`.
    """

    __slots__ = ("_engine", "_rng", "_time_limit_ms")

    def __init__(
        self,
        engine: IEngine | None = None,
        rng: random.Random | None = None,
        *,
        time_limit_ms: int | None = DEFAULT_MOVE_TIME_MS,
    ) -> None:
        self._engine = engine or PythonSearchEngine()
        self._rng = rng or random.Random()
        self._time_limit_ms = time_limit_ms

    @property
    def engine(self) -> IEngine:
        return self._engine

    def select_move(
        self,
        position: Position,
        level: int,
        is_cancelled: CancelCheck | None = None,
    ) -> Move:
        return self.select(position, level, is_cancelled).move

    def select(
        self,
        position: Position,
        level: int,
        is_cancelled: CancelCheck | None = None,
    ) -> Selection:
        if not position.legal_moves():
            raise NoLegalMove("No legal move available for the side to move")

        profile = difficulty_profile(level)
        limits = SearchLimits(
            max_depth=profile.search_depth,
            time_limit_ms=self._time_limit_ms,
        )
        ranked = self._engine.rank_moves(position, limits, is_cancelled).ranked
        if not ranked:
            raise NoLegalMove("Engine returned no ranked moves")

        middle, bottom = split_tiers(ranked)
        if len(ranked) > 1 and self._rng.random() < profile.blunder_rate:
            pick, kind = self._rng.choice(bottom), SelectionKind.BLUNDER
        elif len(ranked) > 1 and self._rng.random() < profile.error_rate:
            pick, kind = self._rng.choice(middle), SelectionKind.ERROR
        else:
            pick, kind = ranked[0], SelectionKind.BEST

        _LOGGER.debug(
            "Level %d picked %s (%s, %d cp) from %d moves",
            level,
            pick.move.uci,
            kind,
            pick.score_cp,
            len(ranked),
        )
        return Selection(pick.move, pick.score_cp, kind, len(ranked))

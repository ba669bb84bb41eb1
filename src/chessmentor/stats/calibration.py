"""Difficulty calibration: rating to level, and in-game adaptation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from chessmentor.analysis.grader import blunder_fraction, calculate_accuracy
from chessmentor.analysis.models import MoveEvaluation
from chessmentor.engine.selector import DIFFICULTY_LEVELS, clamp_level

if TYPE_CHECKING:
    from chessmentor.stats.tracker import PlayerStats

DEFAULT_OPPONENT_ELO = 1000

# Upper rating bound (inclusive) for levels 1..9; anything above is level 10.
_LEVEL_CEILINGS: tuple[int, ...] = (500, 700, 900, 1100, 1300, 1500, 1700, 1900, 2100)

_MIN_SAMPLE = 5
_HIGH_ACCURACY = 85
_LOW_ACCURACY = 50
_STREAK_THRESHOLD = 3
_BLUNDER_FRACTION_LIMIT = 0.2


def elo_to_difficulty(rating: int) -> int:
    for level, ceiling in enumerate(_LEVEL_CEILINGS, start=1):
        if rating <= ceiling:
            return level
    return 10


def adaptive_difficulty(
    base_level: int,
    stats: PlayerStats,
    recent_evaluations: Sequence[MoveEvaluation],
) -> int:
    """Nudge *base_level* by recent accuracy, streak and blunder rate."""
    adjustment = 0
    sample = len(recent_evaluations)

    if sample >= _MIN_SAMPLE:
        accuracy = calculate_accuracy(recent_evaluations)
        if accuracy > _HIGH_ACCURACY:
            adjustment += 1
        elif accuracy < _LOW_ACCURACY:
            adjustment -= 1

    if stats.current_streak >= _STREAK_THRESHOLD:
        adjustment += 1
    elif stats.current_streak <= -_STREAK_THRESHOLD:
        adjustment -= 1

    if sample >= _MIN_SAMPLE and blunder_fraction(recent_evaluations) > _BLUNDER_FRACTION_LIMIT:
        adjustment -= 1

    return clamp_level(base_level + adjustment)


def opponent_elo(level: int, bonus: int = 0) -> int:
    profile = DIFFICULTY_LEVELS.get(level)
    base = profile.target_elo if profile is not None else DEFAULT_OPPONENT_ELO
    return base + bonus

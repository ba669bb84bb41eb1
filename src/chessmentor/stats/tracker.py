"""Player rating and performance bookkeeping."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import StrEnum
from typing import Any

from chessmentor.analysis.models import MoveEvaluation
from chessmentor.stats.calibration import opponent_elo

DEFAULT_ELO = 1000


class GameOutcome(StrEnum):
    """Finished game from the player's point of view."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"

    @property
    def score(self) -> float:
        return _OUTCOME_SCORE[self]


_OUTCOME_SCORE: dict[GameOutcome, float] = {
    GameOutcome.WIN: 1.0,
    GameOutcome.DRAW: 0.5,
    GameOutcome.LOSS: 0.0,
}


@dataclass(slots=True, frozen=True)
class PlayerStats:
    """Cross-game record of one player. Updates return new instances."""

    skill_rating: int = DEFAULT_ELO
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    current_streak: int = 0
    average_accuracy: float = 100.0
    moves_graded: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PlayerStats:
        """Build stats from a mapping; raises ``ValueError`` on bad content."""
        if not isinstance(data, dict):
            raise ValueError("Player stats must be a JSON object")
        values: dict[str, Any] = {}
        for field in fields(cls):
            if field.name not in data:
                continue
            raw = data[field.name]
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise ValueError(f"Invalid value for {field.name}: {raw!r}")
            values[field.name] = float(raw) if field.type == "float" else int(raw)
        stats = cls(**values)
        if stats.games_played < 0 or stats.moves_graded < 0:
            raise ValueError("Negative counters in player stats")
        if not 0.0 <= stats.average_accuracy <= 100.0:
            raise ValueError("Average accuracy out of range")
        return stats


def create_default_stats(initial_elo: int = DEFAULT_ELO) -> PlayerStats:
    return PlayerStats(skill_rating=initial_elo)


def k_factor(rating: int) -> int:
    """Development coefficient: faster movement for lower ratings.

    The lowest band includes 1000 itself, the default starting rating.
    """
    if rating <= 1000:
        return 40
    if rating < 1400:
        return 32
    if rating < 2000:
        return 24
    return 16


def expected_score(player_elo: int, opponent: int) -> float:
    return 1 / (1 + 10 ** ((opponent - player_elo) / 400))


def calculate_elo_change(
    player_elo: int,
    opponent: int,
    result: GameOutcome | str,
) -> int:
    """Rounded rating delta for one game against an *opponent* rating."""
    outcome = GameOutcome(result)
    return round(k_factor(player_elo) * (outcome.score - expected_score(player_elo, opponent)))


def _next_streak(streak: int, outcome: GameOutcome) -> int:
    if outcome == GameOutcome.WIN:
        return streak + 1 if streak > 0 else 1
    if outcome == GameOutcome.LOSS:
        return streak - 1 if streak < 0 else -1
    return streak


def update_stats_after_game(
    stats: PlayerStats,
    result: GameOutcome | str,
    level: int,
) -> PlayerStats:
    """Apply one finished game played against difficulty *level*."""
    outcome = GameOutcome(result)
    delta = calculate_elo_change(stats.skill_rating, opponent_elo(level), outcome)
    return replace(
        stats,
        skill_rating=stats.skill_rating + delta,
        games_played=stats.games_played + 1,
        wins=stats.wins + (outcome == GameOutcome.WIN),
        losses=stats.losses + (outcome == GameOutcome.LOSS),
        draws=stats.draws + (outcome == GameOutcome.DRAW),
        current_streak=_next_streak(stats.current_streak, outcome),
    )


def update_stats_after_move(stats: PlayerStats, evaluation: MoveEvaluation) -> PlayerStats:
    """Fold one graded move into the running average accuracy."""
    graded = stats.moves_graded + 1
    total = stats.average_accuracy * stats.moves_graded + evaluation.grade.accuracy_score
    return replace(
        stats,
        average_accuracy=round(total / graded, 2),
        moves_graded=graded,
    )

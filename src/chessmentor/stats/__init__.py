"""Difficulty calibration and player statistics."""

from chessmentor.stats.calibration import (
    adaptive_difficulty,
    elo_to_difficulty,
    opponent_elo,
)
from chessmentor.stats.store import StatsStore
from chessmentor.stats.tracker import (
    DEFAULT_ELO,
    GameOutcome,
    PlayerStats,
    calculate_elo_change,
    create_default_stats,
    expected_score,
    k_factor,
    update_stats_after_game,
    update_stats_after_move,
)

__all__ = [
    "DEFAULT_ELO",
    "GameOutcome",
    "PlayerStats",
    "StatsStore",
    "adaptive_difficulty",
    "calculate_elo_change",
    "create_default_stats",
    "elo_to_difficulty",
    "expected_score",
    "k_factor",
    "opponent_elo",
    "update_stats_after_game",
    "update_stats_after_move",
]

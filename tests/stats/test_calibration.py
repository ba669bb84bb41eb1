"""Tests for difficulty calibration."""

from __future__ import annotations

import pytest

from chessmentor.analysis.models import MoveEvaluation, MoveGrade
from chessmentor.core.enums import Color
from chessmentor.core.move import Move
from chessmentor.stats.calibration import (
    DEFAULT_OPPONENT_ELO,
    adaptive_difficulty,
    elo_to_difficulty,
    opponent_elo,
)
from chessmentor.stats.tracker import PlayerStats


def _evaluations(*grades: MoveGrade) -> list[MoveEvaluation]:
    return [
        MoveEvaluation(
            color=Color.WHITE,
            played_move=Move(12, 28),
            played_san="e4",
            grade=grade,
            centipawn_loss=0,
            raw_delta=0,
        )
        for grade in grades
    ]


class TestEloToDifficulty:
    @pytest.mark.parametrize(
        ("rating", "level"),
        [
            (100, 1),
            (500, 1),
            (501, 2),
            (800, 3),
            (1000, 4),
            (1100, 4),
            (1200, 5),
            (1600, 7),
            (2100, 9),
            (2101, 10),
            (3000, 10),
        ],
    )
    def test_bands(self, rating: int, level: int) -> None:
        assert elo_to_difficulty(rating) == level


class TestAdaptiveDifficulty:
    def test_no_signal_keeps_level(self) -> None:
        assert adaptive_difficulty(5, PlayerStats(), []) == 5

    def test_small_sample_is_ignored(self) -> None:
        recent = _evaluations(*[MoveGrade.BLUNDER] * 4)
        assert adaptive_difficulty(5, PlayerStats(), recent) == 5

    def test_high_accuracy_raises_level(self) -> None:
        recent = _evaluations(*[MoveGrade.EXCELLENT] * 5)
        assert adaptive_difficulty(5, PlayerStats(), recent) == 6

    def test_accuracy_of_exactly_85_is_not_high(self) -> None:
        recent = _evaluations(*[MoveGrade.GOOD] * 5)
        assert adaptive_difficulty(5, PlayerStats(), recent) == 5

    def test_low_accuracy_and_blunders_lower_level_twice(self) -> None:
        recent = _evaluations(*[MoveGrade.BLUNDER] * 5)
        assert adaptive_difficulty(5, PlayerStats(), recent) == 3

    def test_winning_streak_raises_level(self) -> None:
        assert adaptive_difficulty(5, PlayerStats(current_streak=3), []) == 6

    def test_losing_streak_lowers_level(self) -> None:
        assert adaptive_difficulty(5, PlayerStats(current_streak=-3), []) == 4

    def test_short_streak_is_ignored(self) -> None:
        assert adaptive_difficulty(5, PlayerStats(current_streak=2), []) == 5

    def test_result_is_clamped(self) -> None:
        recent = _evaluations(*[MoveGrade.BLUNDER] * 6)
        assert adaptive_difficulty(1, PlayerStats(current_streak=-5), recent) == 1
        recent = _evaluations(*[MoveGrade.BRILLIANT] * 6)
        assert adaptive_difficulty(10, PlayerStats(current_streak=5), recent) == 10

    def test_blunder_fraction_alone(self) -> None:
        # 2 of 6 blunders: accuracy (4 * 100 + 2 * 15) / 6 = 72 is neutral
        recent = _evaluations(*[MoveGrade.BRILLIANT] * 4, MoveGrade.BLUNDER, MoveGrade.BLUNDER)
        assert adaptive_difficulty(5, PlayerStats(), recent) == 4


class TestOpponentElo:
    def test_from_level(self) -> None:
        assert opponent_elo(1) == 400
        assert opponent_elo(10) == 2200

    def test_bonus(self) -> None:
        assert opponent_elo(4, bonus=50) == 1050

    def test_unknown_level(self) -> None:
        assert opponent_elo(99) == DEFAULT_OPPONENT_ELO

"""Data models produced by move grading."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from chessmentor.core.enums import Color
from chessmentor.core.move import Move
from chessmentor.core.types import Square


class MoveGrade(StrEnum):
    """Move quality tiers, best first."""

    BRILLIANT = "brilliant"
    EXCELLENT = "excellent"
    GOOD = "good"
    INACCURACY = "inaccuracy"
    MISTAKE = "mistake"
    BLUNDER = "blunder"

    @property
    def rank(self) -> int:
        """0 for brilliant up to 5 for blunder."""
        return _GRADE_ORDER.index(self)

    @property
    def accuracy_score(self) -> int:
        """Per-move accuracy contribution, 0–100."""
        return _GRADE_ACCURACY[self]

    @property
    def nag(self) -> str:
        """Chess NAG annotation symbol."""
        return _GRADE_NAG[self]

    @property
    def color_hex(self) -> str:
        """Hex colour string for UI display."""
        return _GRADE_COLOR[self]


_GRADE_ORDER: tuple[MoveGrade, ...] = tuple(MoveGrade)

_GRADE_ACCURACY: dict[MoveGrade, int] = {
    MoveGrade.BRILLIANT: 100,
    MoveGrade.EXCELLENT: 95,
    MoveGrade.GOOD: 85,
    MoveGrade.INACCURACY: 65,
    MoveGrade.MISTAKE: 40,
    MoveGrade.BLUNDER: 15,
}

_GRADE_NAG: dict[MoveGrade, str] = {
    MoveGrade.BRILLIANT: "!!",
    MoveGrade.EXCELLENT: "!",
    MoveGrade.GOOD: "",
    MoveGrade.INACCURACY: "?!",
    MoveGrade.MISTAKE: "?",
    MoveGrade.BLUNDER: "??",
}

_GRADE_COLOR: dict[MoveGrade, str] = {
    MoveGrade.BRILLIANT: "#1baaa7",
    MoveGrade.EXCELLENT: "#5c8bb0",
    MoveGrade.GOOD: "#97af8b",
    MoveGrade.INACCURACY: "#f7c631",
    MoveGrade.MISTAKE: "#e68a2e",
    MoveGrade.BLUNDER: "#ca3431",
}


@dataclass(slots=True, frozen=True)
class MoveEvaluation:
    """Grade of a single played move against the engine's reference move."""

    color: Color
    played_move: Move
    played_san: str
    grade: MoveGrade
    centipawn_loss: int
    raw_delta: int
    best_move: Move | None = None
    best_san: str | None = None

    @property
    def from_sq(self) -> Square:
        return self.played_move.from_sq

    @property
    def to_sq(self) -> Square:
        return self.played_move.to_sq

    @property
    def is_best(self) -> bool:
        return self.best_move is not None and self.best_move == self.played_move


@dataclass(slots=True, frozen=True)
class GradeSummary:
    """Aggregate quality metrics over a list of graded moves."""

    moves: int
    accuracy: int
    avg_cp_loss: float
    brilliant: int = 0
    excellent: int = 0
    good: int = 0
    inaccuracies: int = 0
    mistakes: int = 0
    blunders: int = 0

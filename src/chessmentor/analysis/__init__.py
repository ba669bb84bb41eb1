"""Move grading APIs."""

from chessmentor.analysis.grader import (
    DEFAULT_GRADING_DEPTH,
    MoveGrader,
    blunder_fraction,
    calculate_accuracy,
    grade_for_delta,
    summarize,
)
from chessmentor.analysis.models import GradeSummary, MoveEvaluation, MoveGrade

__all__ = [
    "DEFAULT_GRADING_DEPTH",
    "GradeSummary",
    "MoveEvaluation",
    "MoveGrade",
    "MoveGrader",
    "blunder_fraction",
    "calculate_accuracy",
    "grade_for_delta",
    "summarize",
]

"""Local commentary used when the remote service is unavailable."""

from __future__ import annotations

from chessmentor.analysis.models import MoveEvaluation, MoveGrade

_QUIET_GRADES = frozenset({MoveGrade.GOOD, MoveGrade.EXCELLENT})


def should_request_commentary(evaluation: MoveEvaluation) -> bool:
    """Good and excellent moves get no commentary."""
    return evaluation.grade not in _QUIET_GRADES


def fallback_commentary(evaluation: MoveEvaluation) -> str:
    loss = evaluation.centipawn_loss
    better = evaluation.best_san if not evaluation.is_best else None
    grade = evaluation.grade

    if grade == MoveGrade.BRILLIANT:
        return (
            "Brilliant! You found an exceptional move that significantly improves your position."
        )
    if grade == MoveGrade.EXCELLENT:
        return "Excellent move! You're playing with great precision and understanding."
    if grade == MoveGrade.GOOD:
        return "Solid move. Keep up the good play!"
    if grade == MoveGrade.INACCURACY:
        hint = (
            f"{better} would give you a slightly better position."
            if better
            else "Look for more active moves."
        )
        return f"Small inaccuracy ({loss}cp loss). {hint}"
    if grade == MoveGrade.MISTAKE:
        hint = f" {better} was stronger." if better else ""
        return (
            f"That's a mistake ({loss}cp loss).{hint} "
            "Think about piece activity and king safety!"
        )
    hint = f" {better} was much better." if better else ""
    return (
        f"Significant error ({loss}cp loss)!{hint} "
        "Take your time and check for tactics before moving."
    )

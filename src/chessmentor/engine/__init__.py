"""Chess engine package: evaluation, search, skill-limited selection.

The Qt worker bridge lives in :mod:`chessmentor.engine.qt_bridge` and is not
imported here so the engine stays usable without a Qt event loop.
"""

from chessmentor.engine.evaluation import (
    PIECE_VALUES,
    describe_evaluation,
    evaluate,
    evaluate_for_side,
    evaluation_bar_value,
)
from chessmentor.engine.search import (
    DEFAULT_MOVE_TIME_MS,
    MATE_SCORE,
    IEngine,
    RankedMove,
    SearchLimits,
    SearchResult,
    is_mate_score,
)
from chessmentor.engine.searcher import PythonSearchEngine
from chessmentor.engine.selector import (
    DIFFICULTY_LEVELS,
    AIMoveSelector,
    DifficultyProfile,
    Selection,
    SelectionKind,
    clamp_level,
    difficulty_profile,
)

__all__ = [
    "DIFFICULTY_LEVELS",
    "DEFAULT_MOVE_TIME_MS",
    "MATE_SCORE",
    "PIECE_VALUES",
    "AIMoveSelector",
    "DifficultyProfile",
    "IEngine",
    "PythonSearchEngine",
    "RankedMove",
    "SearchLimits",
    "SearchResult",
    "Selection",
    "SelectionKind",
    "clamp_level",
    "describe_evaluation",
    "difficulty_profile",
    "evaluate",
    "evaluate_for_side",
    "evaluation_bar_value",
    "is_mate_score",
]

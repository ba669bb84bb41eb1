"""Qt bridge to run move selection and grading in a worker thread."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from PyQt6.QtCore import QObject, QThread, pyqtSignal, pyqtSlot

from chessmentor.analysis.grader import MoveGrader
from chessmentor.analysis.models import MoveEvaluation
from chessmentor.core.move import Move
from chessmentor.core.notation import position_to_fen
from chessmentor.core.position import Position
from chessmentor.engine.selector import AIMoveSelector

_LOGGER = logging.getLogger(__name__)


class EngineWorker(QObject):
    """Thread-affine worker that computes opponent moves and grades on demand."""

    move_ready = pyqtSignal(int, object, int)  # request_id, move, score_cp
    grade_ready = pyqtSignal(int, object)  # request_id, MoveEvaluation
    search_cancelled = pyqtSignal(int)
    search_error = pyqtSignal(int, str)

    __slots__ = ("_cancel_event", "_grader", "_selector")

    def __init__(
        self,
        selector: AIMoveSelector | None = None,
        grader: MoveGrader | None = None,
    ) -> None:
        super().__init__()
        self._selector = selector or AIMoveSelector()
        self._grader = grader or MoveGrader()
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int, int)
    def request_move(self, position_obj: object, level: int, request_id: int) -> None:
        """Select the opponent's move in *position_obj* at *level* and emit it."""
        if not isinstance(position_obj, Position):
            self.search_error.emit(request_id, "Engine received invalid position")
            return

        self._cancel_event.clear()
        try:
            selection = self._selector.select(
                position_obj, level, is_cancelled=self._cancel_event.is_set
            )
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return
        self.move_ready.emit(request_id, selection.move, selection.score_cp)

    @pyqtSlot(object, object, int)
    def request_grade(self, position_obj: object, move_obj: object, request_id: int) -> None:
        """Grade *move_obj* played in *position_obj* and emit the evaluation."""
        if not isinstance(position_obj, Position) or not isinstance(move_obj, Move):
            self.search_error.emit(request_id, "Grader received invalid input")
            return

        self._cancel_event.clear()
        try:
            evaluation = self._grader.grade(
                position_obj, move_obj, is_cancelled=self._cancel_event.is_set
            )
        except Exception as exc:
            self.search_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.search_cancelled.emit(request_id)
            return
        self.grade_ready.emit(request_id, evaluation)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current computation."""
        self._cancel_event.set()


class _EngineCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    move_requested = pyqtSignal(object, int, int)
    grade_requested = pyqtSignal(object, object, int)


class BackgroundCoordinator(QObject):
    """Owns the worker thread and drops results for positions no longer current.

    Each request gets a new id. A result is forwarded only if its id is the
    latest one issued for its kind and the session's current position still
    has the FEN the request was made for.
    """

    opponent_move_ready = pyqtSignal(object, int)  # move, score_cp
    evaluation_ready = pyqtSignal(object)  # MoveEvaluation
    failed = pyqtSignal(str)

    def __init__(
        self,
        current_position: Callable[[], Position],
        *,
        selector: AIMoveSelector | None = None,
        grader: MoveGrader | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._current_position = current_position
        self._command_bus = _EngineCommandBus()
        self._thread = QThread()
        self._worker = EngineWorker(selector, grader)
        self._request_id = 0
        self._pending_move: tuple[int, str] | None = None
        self._pending_grade: tuple[int, str] | None = None
        self._is_started = False

    @property
    def is_busy(self) -> bool:
        return self._pending_move is not None or self._pending_grade is not None

    def setup(self) -> None:
        """Start the worker in a dedicated thread and connect callbacks."""
        if self._is_started:
            return
        self._worker.moveToThread(self._thread)
        self._command_bus.move_requested.connect(self._worker.request_move)
        self._command_bus.grade_requested.connect(self._worker.request_grade)
        self._worker.move_ready.connect(self._on_move_ready)
        self._worker.grade_ready.connect(self._on_grade_ready)
        self._worker.search_cancelled.connect(self._on_cancelled)
        self._worker.search_error.connect(self._on_error)
        self._thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Cancel outstanding work and stop the worker thread."""
        if not self._is_started:
            return
        self.cancel()
        self._thread.quit()
        self._thread.wait(2000)
        self._is_started = False

    def request_opponent_move(self, position: Position, level: int) -> int:
        """Queue a move selection; supersedes any earlier move request."""
        self._request_id += 1
        self._pending_move = (self._request_id, position_to_fen(position))
        self._command_bus.move_requested.emit(position, level, self._request_id)
        return self._request_id

    def request_grade(self, position: Position, move: Move) -> int:
        """Queue grading of *move* played from *position*.

        The result is kept only while the session is at the position right
        after *move*.
        """
        self._request_id += 1
        after = position.apply_move(move)
        self._pending_grade = (self._request_id, position_to_fen(after))
        self._command_bus.grade_requested.emit(position, move, self._request_id)
        return self._request_id

    def cancel(self) -> None:
        self._pending_move = None
        self._pending_grade = None
        # The event is thread-safe; a queued slot would wait for the running search.
        self._worker.cancel()

    # -- Worker callbacks ---------------------------------------------------------

    def _take_pending(self, attr: str, request_id: int) -> bool:
        pending: tuple[int, str] | None = getattr(self, attr)
        if pending is None or pending[0] != request_id:
            _LOGGER.debug("Discarding result of superseded request %d", request_id)
            return False
        setattr(self, attr, None)
        if pending[1] != position_to_fen(self._current_position()):
            _LOGGER.debug("Discarding result of request %d for a stale position", request_id)
            return False
        return True

    def _on_move_ready(self, request_id: int, move_obj: object, score_cp: int) -> None:
        if self._take_pending("_pending_move", request_id) and isinstance(move_obj, Move):
            self.opponent_move_ready.emit(move_obj, score_cp)

    def _on_grade_ready(self, request_id: int, evaluation_obj: object) -> None:
        if self._take_pending("_pending_grade", request_id) and isinstance(
            evaluation_obj, MoveEvaluation
        ):
            self.evaluation_ready.emit(evaluation_obj)

    def _on_cancelled(self, request_id: int) -> None:
        for attr in ("_pending_move", "_pending_grade"):
            pending = getattr(self, attr)
            if pending is not None and pending[0] == request_id:
                setattr(self, attr, None)

    def _on_error(self, request_id: int, message: str) -> None:
        ours = any(
            pending is not None and pending[0] == request_id
            for pending in (self._pending_move, self._pending_grade)
        )
        self._on_cancelled(request_id)
        if not ours:
            return
        _LOGGER.warning("Background engine request %d failed: %s", request_id, message)
        self.failed.emit(message)

"""GameSession: one human-versus-engine game with grading and calibration.

Flow of a player move: legality check → grade against the reference search →
stats and difficulty update → terminal check. The opponent's reply is a
separate step (:meth:`GameSession.opponent_move`, or a background result fed
to :meth:`GameSession.apply_engine_move`). Positions are immutable, so undo
and redo only move an index over the list of positions played so far.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from chessmentor.analysis.grader import MoveGrader, calculate_accuracy
from chessmentor.analysis.models import MoveEvaluation
from chessmentor.commentary.client import CommentaryClient
from chessmentor.commentary.templates import should_request_commentary
from chessmentor.config import Settings
from chessmentor.core.enums import Color, PieceType
from chessmentor.core.errors import InvalidMove, NoLegalMove
from chessmentor.core.move import Move
from chessmentor.core.notation import (
    STARTING_FEN,
    build_pgn,
    move_to_san,
    pgn_result_token,
    position_from_fen,
    position_to_fen,
)
from chessmentor.core.position import Position
from chessmentor.core.types import Square
from chessmentor.engine.evaluation import (
    describe_evaluation,
    evaluate,
    evaluation_bar_value,
)
from chessmentor.engine.searcher import PythonSearchEngine
from chessmentor.engine.selector import AIMoveSelector, difficulty_profile
from chessmentor.stats.calibration import adaptive_difficulty, elo_to_difficulty
from chessmentor.stats.store import StatsStore
from chessmentor.stats.tracker import (
    GameOutcome,
    PlayerStats,
    create_default_stats,
    update_stats_after_game,
    update_stats_after_move,
)

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str, Position], None]  # move, san, new position
EvaluationCallback = Callable[[MoveEvaluation], None]
CommentaryCallback = Callable[[MoveEvaluation, str], None]
DifficultyCallback = Callable[[int], None]
GameOverCallback = Callable[[GameOutcome, PlayerStats], None]


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_evaluation: list[EvaluationCallback] = field(default_factory=list)
    on_commentary: list[CommentaryCallback] = field(default_factory=list)
    on_difficulty_changed: list[DifficultyCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession:
    """Orchestrates a game between the player and the calibrated opponent.

    Methods are meant to be called from a single thread. Background engine
    results must go through :meth:`apply_engine_move`, which rejects a move
    computed for a position that is no longer current.
    """

    __slots__ = (
        "_settings",
        "_store",
        "_selector",
        "_grader",
        "_commentary",
        "_stats",
        "_player_color",
        "_level",
        "_positions",
        "_sans",
        "_evaluations",
        "_index",
        "_outcome",
        "_last_comment",
        "events",
    )

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        store: StatsStore | None = None,
        selector: AIMoveSelector | None = None,
        grader: MoveGrader | None = None,
        commentary: CommentaryClient | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._store = store or StatsStore(self._settings.resolved_stats_path())
        engine = PythonSearchEngine()
        self._selector = selector or AIMoveSelector(
            engine,
            random.Random(self._settings.rng_seed),
            time_limit_ms=self._settings.engine_time_ms,
        )
        self._grader = grader or MoveGrader(
            engine,
            depth=self._settings.grading_depth,
            time_limit_ms=self._settings.engine_time_ms,
        )
        self._commentary = commentary
        self.events = SessionEvents()

        loaded = self._store.load()
        self._stats = loaded or create_default_stats(self._settings.default_elo)
        self._player_color = Color.WHITE
        self._level = elo_to_difficulty(self._stats.skill_rating)
        self._positions: list[Position] = [Position.initial()]
        self._sans: list[str] = []
        self._evaluations: list[MoveEvaluation | None] = []
        self._index = 0
        self._outcome: GameOutcome | None = None
        self._last_comment: str | None = None

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def position(self) -> Position:
        return self._positions[self._index]

    @property
    def player_color(self) -> Color:
        return self._player_color

    @property
    def stats(self) -> PlayerStats:
        return self._stats

    @property
    def level(self) -> int:
        """Current opponent difficulty level, 1–10."""
        return self._level

    @property
    def opponent_elo(self) -> int:
        return difficulty_profile(self._level).target_elo

    @property
    def is_player_turn(self) -> bool:
        return self.position.side_to_move == self._player_color

    @property
    def is_over(self) -> bool:
        return self.position.is_game_over or self._outcome is not None

    @property
    def outcome(self) -> GameOutcome | None:
        return self._outcome

    @property
    def san_moves(self) -> list[str]:
        """SAN of every move up to the current position."""
        return self._sans[: self._index]

    @property
    def evaluations(self) -> list[MoveEvaluation]:
        """Grades of the player's moves up to the current position."""
        return [e for e in self._evaluations[: self._index] if e is not None]

    @property
    def accuracy(self) -> int:
        return calculate_accuracy(self.evaluations)

    @property
    def last_comment(self) -> str | None:
        return self._last_comment

    @property
    def can_undo(self) -> bool:
        return self._player_turn_before(self._index) is not None

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._positions) - 1

    # ── Lifecycle ────────────────────────────────────────────────────────

    def new_game(
        self,
        player_color: Color = Color.WHITE,
        *,
        fen: str | None = None,
        initial_elo: int | None = None,
    ) -> None:
        """Start a new game; *initial_elo* only applies to a player with no games."""
        if initial_elo is not None and self._stats.games_played == 0:
            self._stats = create_default_stats(initial_elo)
            self._save_stats()

        start = position_from_fen(fen) if fen else Position.initial()
        self._player_color = player_color
        self._positions = [start]
        self._sans = []
        self._evaluations = []
        self._index = 0
        self._outcome = None
        self._last_comment = None
        self._set_level(elo_to_difficulty(self._stats.skill_rating))
        _LOGGER.info(
            "New game: player %s, rating %d, level %d",
            player_color,
            self._stats.skill_rating,
            self._level,
        )

    def submit_move(
        self,
        from_sq: Square,
        to_sq: Square,
        promotion: PieceType | None = None,
    ) -> MoveEvaluation:
        """Play the player's move, grade it and update stats and difficulty.

        Raises :class:`InvalidMove` if the game is over, it is not the
        player's turn, or the move is illegal; the session is unchanged.
        """
        if self.is_over:
            raise InvalidMove("The game is over")
        if not self.is_player_turn:
            raise InvalidMove("It is not the player's turn")

        before = self.position
        move = before.find_move(from_sq, to_sq, promotion)
        evaluation = self._grader.grade(before, move)
        self._push(before, move, evaluation)

        self._stats = update_stats_after_move(self._stats, evaluation)
        self._save_stats()
        for cb in self.events.on_evaluation:
            cb(evaluation)

        self._request_commentary(before, evaluation)
        self._set_level(
            adaptive_difficulty(
                elo_to_difficulty(self._stats.skill_rating),
                self._stats,
                self.evaluations,
            )
        )
        self._check_game_over()
        return evaluation

    def opponent_move(self) -> Move:
        """Let the opponent select and play its move synchronously."""
        if self.is_over:
            raise NoLegalMove("The game is over")
        if self.is_player_turn:
            raise InvalidMove("It is the player's turn")
        position = self.position
        move = self._selector.select_move(position, self._level)
        self.apply_engine_move(move, position)
        return move

    def apply_engine_move(self, move: Move, computed_for: Position | None = None) -> bool:
        """Apply an opponent move; ``False`` if it belongs to a stale position."""
        current = self.position
        if computed_for is not None and position_to_fen(computed_for) != position_to_fen(
            current
        ):
            _LOGGER.debug("Dropping engine move %s for a stale position", move)
            return False
        if self.is_over or self.is_player_turn:
            _LOGGER.debug("Dropping engine move %s: not the opponent's turn", move)
            return False
        if move not in current.legal_moves():
            raise InvalidMove(f"Engine produced illegal move {move}")
        self._push(current, move, None)
        self._check_game_over()
        return True

    def resign(self) -> None:
        if self.is_over:
            return
        self._finish(GameOutcome.LOSS)

    # ── History navigation ──────────────────────────────────────────────

    def undo(self) -> bool:
        """Step back to the player's previous turn."""
        target = self._player_turn_before(self._index)
        if target is None:
            return False
        self._index = target
        return True

    def redo(self) -> bool:
        """Step forward to the player's next turn, or to the latest position."""
        if not self.can_redo:
            return False
        last = len(self._positions) - 1
        self._index = next(
            (
                i
                for i in range(self._index + 1, last)
                if self._positions[i].side_to_move == self._player_color
            ),
            last,
        )
        return True

    def _player_turn_before(self, index: int) -> int | None:
        for i in range(index - 1, -1, -1):
            if self._positions[i].side_to_move == self._player_color:
                return i
        return None

    # ── Presentation helpers ────────────────────────────────────────────

    def evaluation_bar(self) -> float:
        return evaluation_bar_value(evaluate(self.position))

    def evaluation_text(self) -> str:
        return describe_evaluation(evaluate(self.position))

    def pgn(self) -> str:
        start = self._positions[0]
        player = "Player"
        opponent = f"chessmentor (level {self._level})"
        white, black = (
            (player, opponent) if self._player_color == Color.WHITE else (opponent, player)
        )
        result = pgn_result_token(self.position.result)
        if self._outcome is not None and result == "*":
            player_won = self._outcome == GameOutcome.WIN
            white_won = player_won == (self._player_color == Color.WHITE)
            result = "1-0" if white_won else "0-1"
        headers = {
            "Event": "chessmentor game",
            "Date": date.today().strftime("%Y.%m.%d"),
            "White": white,
            "Black": black,
            "Result": result,
        }
        start_fen = position_to_fen(start)
        if start_fen != STARTING_FEN:
            headers["SetUp"] = "1"
            headers["FEN"] = start_fen
        comments = [
            f"{e.grade} ({e.centipawn_loss}cp)" if e is not None else None
            for e in self._evaluations[: self._index]
        ]
        return build_pgn(
            headers,
            self.san_moves,
            result,
            comments,
            first_fullmove=start.fullmove_number,
            black_first=start.side_to_move == Color.BLACK,
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _push(
        self,
        before: Position,
        move: Move,
        evaluation: MoveEvaluation | None,
    ) -> None:
        san = move_to_san(before, move)
        after = before.apply_move(move)
        # A new move after undo discards the redo tail.
        del self._positions[self._index + 1 :]
        del self._sans[self._index :]
        del self._evaluations[self._index :]
        self._positions.append(after)
        self._sans.append(san)
        self._evaluations.append(evaluation)
        self._index += 1
        for cb in self.events.on_move:
            cb(move, san, after)

    def _request_commentary(self, before: Position, evaluation: MoveEvaluation) -> None:
        self._last_comment = None
        if self._commentary is None or not should_request_commentary(evaluation):
            return
        text = self._commentary.comment(
            position_to_fen(before),
            evaluation,
            self.san_moves,
            self._stats,
        )
        self._last_comment = text
        for cb in self.events.on_commentary:
            cb(evaluation, text)

    def _set_level(self, level: int) -> None:
        if level == self._level:
            return
        _LOGGER.info("Difficulty level %d -> %d", self._level, level)
        self._level = level
        for cb in self.events.on_difficulty_changed:
            cb(level)

    def _check_game_over(self) -> None:
        position = self.position
        if not position.is_game_over or self._outcome is not None:
            return
        if position.is_checkmate:
            mated = position.side_to_move
            outcome = GameOutcome.LOSS if mated == self._player_color else GameOutcome.WIN
        else:
            outcome = GameOutcome.DRAW
        self._finish(outcome)

    def _finish(self, outcome: GameOutcome) -> None:
        self._outcome = outcome
        self._stats = update_stats_after_game(self._stats, outcome, self._level)
        self._save_stats()
        _LOGGER.info(
            "Game over: %s, rating now %d (%d games)",
            outcome,
            self._stats.skill_rating,
            self._stats.games_played,
        )
        for cb in self.events.on_game_over:
            cb(outcome, self._stats)

    def _save_stats(self) -> None:
        try:
            self._store.save(self._stats)
        except OSError as exc:
            _LOGGER.warning("Could not save player stats to %s: %s", self._store.path, exc)

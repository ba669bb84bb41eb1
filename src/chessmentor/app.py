"""Application entry point: a terminal game against the calibrated opponent."""

from __future__ import annotations

import argparse
import logging
import sys

from chessmentor.analysis.models import MoveEvaluation
from chessmentor.commentary.client import CommentaryClient
from chessmentor.commentary.templates import fallback_commentary, should_request_commentary
from chessmentor.config import Settings
from chessmentor.core.enums import Color
from chessmentor.core.errors import InvalidMove
from chessmentor.core.move import Move
from chessmentor.core.notation import parse_san
from chessmentor.game.session import GameSession
from chessmentor.stats.store import StatsStore

_HELP = "Enter a move (SAN like Nf3 or UCI like g1f3), or: undo, redo, pgn, resign, quit"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="chessmentor", description=__doc__)
    parser.add_argument("--black", action="store_true", help="play the black pieces")
    parser.add_argument("--elo", type=int, default=None, help="starting rating for a new player")
    parser.add_argument("--fen", default=None, help="start from this position")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _print_evaluation(session: GameSession, evaluation: MoveEvaluation) -> None:
    nag = evaluation.grade.nag
    print(f"{evaluation.played_san}{nag}: {evaluation.grade} ({evaluation.centipawn_loss}cp loss)")
    comment = session.last_comment
    if comment is None and should_request_commentary(evaluation):
        comment = fallback_commentary(evaluation)
    if comment:
        print(f"  {comment}")


def _play_player_move(session: GameSession, text: str) -> None:
    position = session.position
    try:
        move = parse_san(position, text)
    except InvalidMove:
        try:
            from_sq, to_sq, promotion = Move.parse_uci(text)
        except ValueError as exc:
            raise InvalidMove(f"Cannot read move {text!r}") from exc
        move = Move(from_sq, to_sq, promotion=promotion)
    evaluation = session.submit_move(move.from_sq, move.to_sq, move.promotion)
    _print_evaluation(session, evaluation)


def run(session: GameSession) -> None:
    print(_HELP)
    while True:
        position = session.position
        print()
        print(repr(position.board))
        rating = session.stats.skill_rating
        print(f"{session.evaluation_text()} | level {session.level} | rating {rating}")

        if session.is_over:
            print(f"Game over: {session.outcome or position.result.name.lower()}")
            print(session.pgn())
            return

        if not session.is_player_turn:
            move = session.opponent_move()
            print(f"Opponent plays {session.san_moves[-1]} ({move.uci})")
            continue

        try:
            text = input("> ").strip()
        except EOFError:
            return
        if text in ("quit", "exit"):
            return
        if text == "undo":
            session.undo()
        elif text == "redo":
            session.redo()
        elif text == "pgn":
            print(session.pgn())
        elif text == "resign":
            session.resign()
        elif text:
            try:
                _play_player_move(session, text)
            except InvalidMove as exc:
                print(f"{exc}. {_HELP}")


def main(argv: list[str] | None = None) -> None:
    """Launch a terminal game."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = Settings.from_env()
    commentary = CommentaryClient(
        settings.commentary_url,
        timeout=settings.commentary_timeout_s,
        api_token=settings.commentary_token,
        recent_window=settings.commentary_recent_moves,
    )
    session = GameSession(
        settings=settings,
        store=StatsStore(settings.resolved_stats_path()),
        commentary=commentary,
    )
    session.new_game(
        Color.BLACK if args.black else Color.WHITE,
        fen=args.fen,
        initial_elo=args.elo,
    )
    try:
        run(session)
    except KeyboardInterrupt:
        pass
    sys.exit(0)


if __name__ == "__main__":
    main()

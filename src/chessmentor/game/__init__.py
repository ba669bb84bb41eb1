"""Game management layer: a graded, calibrated game against the engine.

Quick start::

    from chessmentor.game import GameSession
    from chessmentor.core import Color, parse_square

    session = GameSession()
    session.new_game(Color.WHITE)
    evaluation = session.submit_move(parse_square("e2"), parse_square("e4"))
    reply = session.opponent_move()
"""

from chessmentor.game.session import GameSession, SessionEvents

__all__ = ["GameSession", "SessionEvents"]

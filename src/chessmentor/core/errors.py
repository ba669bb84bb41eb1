"""Domain exceptions raised by the rules engine and the engine layer."""

from __future__ import annotations


class InvalidMove(ValueError):
    """The requested move is not legal for the side to move."""


class InvalidPosition(ValueError):
    """A position description (FEN or snapshot) cannot form a legal game state."""


class NoLegalMove(RuntimeError):
    """A move was requested from a position where the game is already over.

    Callers must check the terminal flags of a position before asking the
    selector or the grader for work; this is a contract violation.
    """

"""HTTP client for the natural-language move commentary service."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import requests

from chessmentor.analysis.models import MoveEvaluation
from chessmentor.commentary.templates import fallback_commentary
from chessmentor.core.types import square_name
from chessmentor.stats.tracker import PlayerStats

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_RECENT_MOVES = 10


def build_payload(
    fen: str,
    evaluation: MoveEvaluation,
    recent_moves: Sequence[str],
    stats: PlayerStats | None,
    *,
    recent_window: int = DEFAULT_RECENT_MOVES,
) -> dict[str, Any]:
    best = evaluation.best_move
    return {
        "fen": fen,
        "move": {
            "from": square_name(evaluation.from_sq),
            "to": square_name(evaluation.to_sq),
            "san": evaluation.played_san,
        },
        "grade": str(evaluation.grade),
        "centipawn_loss": evaluation.centipawn_loss,
        "best_move": (
            {
                "from": square_name(best.from_sq),
                "to": square_name(best.to_sq),
                "san": evaluation.best_san,
            }
            if best is not None
            else None
        ),
        "recent_moves": list(recent_moves)[-recent_window:] if recent_window else [],
        "player": (
            {
                "skill_rating": stats.skill_rating,
                "average_accuracy": stats.average_accuracy,
            }
            if stats is not None
            else None
        ),
    }


class CommentaryClient:
    """Posts graded moves to a commentary endpoint.

    :meth:`comment` never raises: with no URL configured, or on any network,
    HTTP or payload failure, it returns the local template for the grade.
    """

    __slots__ = ("_url", "_timeout", "_token", "_recent_window", "_session")

    def __init__(
        self,
        url: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_S,
        api_token: str | None = None,
        recent_window: int = DEFAULT_RECENT_MOVES,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url or None
        self._timeout = timeout
        self._token = api_token
        self._recent_window = recent_window
        self._session = session

    @property
    def enabled(self) -> bool:
        return self._url is not None

    def comment(
        self,
        fen: str,
        evaluation: MoveEvaluation,
        recent_moves: Sequence[str] = (),
        stats: PlayerStats | None = None,
    ) -> str:
        if self._url is None:
            return fallback_commentary(evaluation)

        payload = build_payload(
            fen, evaluation, recent_moves, stats, recent_window=self._recent_window
        )
        try:
            text = self._post(payload)
        except (requests.RequestException, ValueError) as exc:
            _LOGGER.warning("Commentary service failed, using fallback: %s", exc)
            return fallback_commentary(evaluation)
        return text

    def _post(self, payload: dict[str, Any]) -> str:
        assert self._url is not None
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        poster = self._session.post if self._session is not None else requests.post
        resp = poster(self._url, json=payload, timeout=self._timeout, headers=headers)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise ValueError("Commentary response is not a JSON object")
        text = data.get("analysis") or data.get("text")
        if not isinstance(text, str) or not text.strip():
            raise ValueError("Commentary response has no text")
        return text.strip()

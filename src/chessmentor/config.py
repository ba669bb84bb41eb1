"""Runtime settings, overridable through ``CHESSMENTOR_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path

from chessmentor.engine.search import DEFAULT_MOVE_TIME_MS

_LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "CHESSMENTOR_"


def _default_stats_path() -> Path:
    return Path.home() / ".chessmentor" / "player_stats.json"


@dataclass(slots=True)
class Settings:
    """All configurable settings."""

    # Engine
    engine_time_ms: int | None = DEFAULT_MOVE_TIME_MS
    grading_depth: int = 2
    rng_seed: int | None = None

    # Player
    default_elo: int = 1000

    # Commentary
    commentary_url: str | None = None
    commentary_token: str | None = None
    commentary_timeout_s: float = 10.0
    commentary_recent_moves: int = 10

    # Storage
    stats_path: Path | None = None

    def resolved_stats_path(self) -> Path:
        return self.stats_path if self.stats_path is not None else _default_stats_path()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``CHESSMENTOR_<FIELD>`` variables.

        Values that fail to convert are logged and left at their default.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        for field in fields(cls):
            raw = env.get(ENV_PREFIX + field.name.upper())
            if raw is None or raw == "":
                continue
            try:
                value = _convert(field.type, raw)
            except ValueError:
                _LOGGER.warning(
                    "Ignoring invalid %s%s=%r", ENV_PREFIX, field.name.upper(), raw
                )
                continue
            setattr(settings, field.name, value)
        return settings


def _convert(annotation: object, raw: str) -> object:
    text = str(annotation)
    if text.startswith("int"):
        return int(raw)
    if text.startswith("float"):
        return float(raw)
    if text.startswith("Path"):
        return Path(raw).expanduser()
    return raw

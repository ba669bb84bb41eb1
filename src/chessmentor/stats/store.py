"""JSON persistence for :class:`PlayerStats`."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from chessmentor.stats.tracker import PlayerStats

_LOGGER = logging.getLogger(__name__)


class StatsStore:
    """Single-record stats file with atomic writes."""

    __slots__ = ("_path",)

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PlayerStats | None:
        """Stored stats, or ``None`` if the file is missing or unusable.

        Unreadable or malformed content is logged and discarded.
        """
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return PlayerStats.from_dict(data)
        except (OSError, ValueError, TypeError) as exc:
            # json.JSONDecodeError is a ValueError.
            _LOGGER.warning("Ignoring unreadable stats file %s: %s", self._path, exc)
            return None

    def save(self, stats: PlayerStats) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(stats.to_dict(), indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

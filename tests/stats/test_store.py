"""Tests for stats persistence."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from chessmentor.stats.store import StatsStore
from chessmentor.stats.tracker import PlayerStats


class TestStatsStore:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert StatsStore(tmp_path / "stats.json").load() is None

    def test_round_trip(self, tmp_path: Path) -> None:
        store = StatsStore(tmp_path / "stats.json")
        stats = PlayerStats(1180, 7, 4, 2, 1, 2, 78.25, 90)
        store.save(stats)
        assert store.load() == stats

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        store = StatsStore(tmp_path / "nested" / "dir" / "stats.json")
        store.save(PlayerStats())
        assert store.path.exists()
        assert not store.path.with_suffix(".json.tmp").exists()

    def test_file_is_plain_json(self, tmp_path: Path) -> None:
        store = StatsStore(tmp_path / "stats.json")
        store.save(PlayerStats(skill_rating=1111))
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["skill_rating"] == 1111
        assert set(data) == {
            "skill_rating",
            "games_played",
            "wins",
            "losses",
            "draws",
            "current_streak",
            "average_accuracy",
            "moves_graded",
        }

    def test_save_overwrites(self, tmp_path: Path) -> None:
        store = StatsStore(tmp_path / "stats.json")
        store.save(PlayerStats(skill_rating=900))
        store.save(PlayerStats(skill_rating=950))
        loaded = store.load()
        assert loaded is not None and loaded.skill_rating == 950

    @pytest.mark.parametrize(
        "content",
        ["not json", "[1, 2]", '{"skill_rating": "abc"}', '{"games_played": -3}'],
    )
    def test_malformed_file_is_ignored(
        self,
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
        content: str,
    ) -> None:
        path = tmp_path / "stats.json"
        path.write_text(content, encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="chessmentor.stats.store"):
            assert StatsStore(path).load() is None
        assert "Ignoring unreadable stats file" in caplog.text

"""JSON persistence of exam rank and practice history."""
from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..core.constants import MAX_RANK, RANK_BADGES
from ..core.entities import MatchOutcome, OutcomeKind

logger = logging.getLogger(__name__)


class ProgressStore:
    """Rank (0..MAX_RANK) and the fastest practice times, kept in one JSON file."""

    def __init__(self, path: Union[str, Path], history_limit: int = 100):
        self.path = Path(path)
        self.history_limit = history_limit
        self._data: Dict[str, Any] = {"rank": 0, "practice_history": []}
        self._load()

    def _load(self) -> None:
        if not self.path.is_file():
            logger.info(f"No progress file at '{self.path}', starting fresh")
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read progress file '{self.path}': {e}. Starting fresh.")
            return
        if not isinstance(loaded, dict):
            logger.error(f"Progress file '{self.path}' is not a JSON object. Starting fresh.")
            return

        rank = loaded.get("rank", 0)
        if isinstance(rank, int) and 0 <= rank <= MAX_RANK:
            self._data["rank"] = rank
        history = loaded.get("practice_history", [])
        if isinstance(history, list):
            self._data["practice_history"] = [
                r for r in history
                if isinstance(r, dict) and "id" in r and isinstance(r.get("time"), (int, float))
            ]

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    @property
    def rank(self) -> int:
        return self._data["rank"]

    @property
    def rank_badge(self) -> str:
        return RANK_BADGES[self.rank]

    def save_rank(self, rank: int) -> int:
        """Persist a new rank. Ranks never go down; returns the stored rank."""
        if not 0 <= rank <= MAX_RANK:
            raise ValueError(f"Rank must be between 0 and {MAX_RANK}, got {rank}")
        if rank > self._data["rank"]:
            self._data["rank"] = rank
            self._save()
            logger.info(f"Rank saved: {rank} ({self.rank_badge})")
        return self._data["rank"]

    def record_practice(self, target_id: str, seconds: float, day: Optional[date] = None) -> None:
        """Add a practice time; history stays sorted fastest first and bounded."""
        history: List[Dict[str, Any]] = self._data["practice_history"]
        history.append({
            "id": target_id,
            "time": round(float(seconds), 2),
            "date": (day or date.today()).isoformat(),
        })
        history.sort(key=lambda r: r["time"])
        del history[self.history_limit:]
        self._save()

    def best_times(self, target_id: str, n: int = 5) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._data["practice_history"] if r["id"] == target_id][:n]

    def clear_history(self) -> None:
        self._data["practice_history"] = []
        self._save()


class ProgressRecorder:
    """Session outcome listener that persists practice times and passed ranks."""

    def __init__(self, store: ProgressStore):
        self.store = store

    def __call__(self, outcome: MatchOutcome) -> None:
        if outcome.kind is OutcomeKind.COMPLETED and outcome.elapsed_seconds is not None:
            self.store.record_practice(outcome.target, outcome.elapsed_seconds)
        elif outcome.kind is OutcomeKind.RANK_PASSED and outcome.rank is not None:
            self.store.save_rank(outcome.rank)

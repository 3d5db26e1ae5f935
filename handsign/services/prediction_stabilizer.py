"""Run-length debouncing of per-frame classifier labels."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..core.entities import CommitEvent

logger = logging.getLogger(__name__)


class PredictionStabilizer:
    """Turns a noisy label stream into committed labels.

    A label is committed once it has been observed on ``threshold`` consecutive
    frames, and only if it differs from the most recently committed label, so
    holding a sign steady commits it exactly once.
    """

    def __init__(self, threshold: int = 5):
        self.set_threshold(threshold)
        self.previous_label: Optional[str] = None
        self.run_length = 0
        self._committed: List[str] = []

    def set_threshold(self, threshold: int) -> None:
        if int(threshold) < 1:
            raise ValueError(f"Stabilizer threshold must be >= 1, got {threshold}")
        self.threshold = int(threshold)

    @property
    def committed(self) -> List[str]:
        return list(self._committed)

    @property
    def last_committed(self) -> Optional[str]:
        return self._committed[-1] if self._committed else None

    @property
    def progress(self) -> float:
        return min(self.run_length / self.threshold, 1.0)

    def step(self, label: Optional[str], confidence: float = 1.0) -> Optional[CommitEvent]:
        """Feed one frame's label (None when nothing was classified)."""
        if label is None:
            self.run_length = 0
            self.previous_label = None
            return None

        if label != self.previous_label:
            self.previous_label = label
            self.run_length = 1
        else:
            self.run_length += 1

        if self.run_length >= self.threshold and label != self.last_committed:
            self._committed.append(label)
            logger.debug(f"Committed '{label}' after {self.run_length} frames")
            return CommitEvent(
                label=label,
                committed=tuple(self._committed),
                progress=self.run_length / self.threshold,
                confidence=confidence,
            )
        return None

    def reset(self) -> None:
        """Clear the run and the committed sequence."""
        self.previous_label = None
        self.run_length = 0
        self._committed.clear()

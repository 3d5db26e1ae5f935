"""Matching of committed labels against target sequences.

One policy is chosen per session (by game mode) and receives every committed
label through :meth:`MatchPolicy.advance`. Confidence gating happens before
a label reaches the policy.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..core.constants import MAX_RANK, RANK_LEVELS
from ..core.entities import MatchOutcome, OutcomeKind, RankLevel, SequenceTarget
from ..core.exceptions import SequenceConfigError, SessionError

logger = logging.getLogger(__name__)

NO_MATCH = MatchOutcome(kind=OutcomeKind.NONE)


class GameMode(Enum):
    LEARN = "learn"
    EXPLORE = "explore"
    PRACTICE = "practice"
    EXAM = "exam"


class MatchPolicy(ABC):
    """Strategy interface shared by all game modes."""

    @abstractmethod
    def advance(self, label: str) -> MatchOutcome:
        """Consume one committed label."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Start over (new attempt / cleared buffer)."""
        pass

    def on_signal_lost(self) -> None:
        """Called once when the hands disappear from view."""
        pass


class FullMatchPolicy(MatchPolicy):
    """Free exploration: the whole committed buffer must equal a target."""

    def __init__(self, targets: Iterable[SequenceTarget]):
        self.targets: Tuple[SequenceTarget, ...] = tuple(targets)
        self._buffer: List[str] = []

    @property
    def buffer(self) -> List[str]:
        return list(self._buffer)

    def advance(self, label: str) -> MatchOutcome:
        self._buffer.append(label)
        for target in self.targets:
            if len(target.sequence) == len(self._buffer) and list(target.sequence) == self._buffer:
                logger.info(f"Sequence matched: {target.name}")
                return MatchOutcome(
                    kind=OutcomeKind.MATCHED,
                    target=target.name,
                    step_index=len(self._buffer),
                    committed=tuple(self._buffer),
                )
        return NO_MATCH

    def reset(self) -> None:
        self._buffer.clear()

    # NOTE: the buffer is only cleared here and by reset(); a partial sequence
    # survives while hands stay in view, even across unrelated attempts.
    def on_signal_lost(self) -> None:
        self.reset()


class StepPolicy(MatchPolicy):
    """Practice: walk one target step by step, ignoring stray labels."""

    def __init__(self, target: SequenceTarget, clock: Callable[[], float] = time.monotonic):
        self.target = target
        self._clock = clock
        self.step_index = 0
        self.active = False
        self.start_time: Optional[float] = None

    def start(self) -> None:
        self.step_index = 0
        self.active = True
        self.start_time = self._clock()
        logger.info(f"Practice started: {self.target.name}")

    def reset(self) -> None:
        self.start()

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None:
            return 0.0
        return self._clock() - self.start_time

    @property
    def expected_label(self) -> Optional[str]:
        if not self.active:
            return None
        return self.target.sequence[self.step_index]

    def advance(self, label: str) -> MatchOutcome:
        if not self.active or label != self.target.sequence[self.step_index]:
            return NO_MATCH

        self.step_index += 1
        if self.step_index >= len(self.target.sequence):
            self.active = False
            elapsed = round(self.elapsed_seconds, 2)
            logger.info(f"Practice completed: {self.target.name} in {elapsed:.2f}s")
            return MatchOutcome(
                kind=OutcomeKind.COMPLETED,
                target=self.target.key,
                step_index=self.step_index,
                elapsed_seconds=elapsed,
            )
        return MatchOutcome(kind=OutcomeKind.STEP, target=self.target.key, step_index=self.step_index)


class CurriculumPolicy(MatchPolicy):
    """Exam: every target of the current rank's level, in order.

    ``rank`` is the number of levels already passed. Only the level at that
    index can be attempted, and passing it is the only way to reach the next.
    """

    def __init__(self, catalog, rank: int = 0, levels: Sequence[RankLevel] = RANK_LEVELS):
        self.catalog = catalog
        self.levels = tuple(levels)
        if not 0 <= rank <= len(self.levels):
            raise ValueError(f"Rank must be between 0 and {len(self.levels)}, got {rank}")
        self.rank = rank
        self.active = False
        self.targets: List[SequenceTarget] = []
        self.target_index = 0
        self.step_index = 0
        self.completed_targets: List[str] = []

    @property
    def max_rank(self) -> int:
        return len(self.levels)

    @property
    def current_level(self) -> RankLevel:
        """Level being examined; the top level once every rank is passed."""
        return self.levels[min(self.rank, self.max_rank - 1)]

    @property
    def current_target(self) -> Optional[SequenceTarget]:
        if not self.active:
            return None
        return self.targets[self.target_index]

    def start(self) -> None:
        """Begin the exam for the current level.

        Raises:
            SessionError: if every rank has already been passed
            SequenceConfigError: if the level has no target sequences
        """
        if self.rank >= self.max_rank:
            raise SessionError(f"Rank {self.rank} is already the highest rank")

        level = self.levels[self.rank]
        targets = self.catalog.for_level(level.key)
        if not targets:
            raise SequenceConfigError(f"No target sequences configured for level '{level.key}'")

        self.targets = targets
        self.target_index = 0
        self.step_index = 0
        self.completed_targets = []
        self.active = True
        logger.info(f"Exam started: {level.title} ({len(targets)} targets)")

    def reset(self) -> None:
        self.active = False
        self.target_index = 0
        self.step_index = 0
        self.completed_targets = []

    def advance(self, label: str) -> MatchOutcome:
        target = self.current_target
        if target is None or label != target.sequence[self.step_index]:
            return NO_MATCH

        self.step_index += 1
        if self.step_index < len(target.sequence):
            return MatchOutcome(kind=OutcomeKind.STEP, target=target.key, step_index=self.step_index)

        self.completed_targets.append(target.key)
        self.target_index += 1
        self.step_index = 0
        if self.target_index < len(self.targets):
            logger.info(f"Exam target completed: {target.name}")
            return MatchOutcome(
                kind=OutcomeKind.TARGET_COMPLETED,
                target=target.key,
                step_index=self.target_index,
            )

        self.active = False
        self.rank += 1
        logger.info(f"Rank passed: {self.rank} ({self.levels[self.rank - 1].name})")
        return MatchOutcome(kind=OutcomeKind.RANK_PASSED, target=target.key, rank=self.rank)


class SignDrillPolicy(MatchPolicy):
    """Learn mode: a single sign, matched once until reselected."""

    def __init__(self, sign: Optional[str] = None):
        self.sign = sign
        self.matched = False

    def select(self, sign: str) -> None:
        self.sign = sign
        self.matched = False

    def reset(self) -> None:
        self.matched = False

    def advance(self, label: str) -> MatchOutcome:
        if self.sign is None or self.matched or label != self.sign:
            return NO_MATCH
        self.matched = True
        return MatchOutcome(kind=OutcomeKind.MATCHED, target=self.sign, step_index=1, committed=(label,))


def create_policy(mode, catalog=None, target: Optional[str] = None, rank: int = 0,
                  clock: Callable[[], float] = time.monotonic) -> MatchPolicy:
    """Build the policy for a game mode.

    Args:
        mode: :class:`GameMode` or its value
        catalog: :class:`~handsign.config.sequences.SequenceCatalog`
        target: sign token (learn) or target id/name (practice)
        rank: persisted rank (exam)
    """
    mode = GameMode(mode)
    if mode is GameMode.LEARN:
        return SignDrillPolicy(target)
    if catalog is None:
        raise ValueError(f"Mode '{mode.value}' requires a sequence catalog")
    if mode is GameMode.EXPLORE:
        return FullMatchPolicy(catalog)
    if mode is GameMode.PRACTICE:
        if target is None:
            raise ValueError("Practice mode requires a target sequence")
        policy = StepPolicy(catalog.get(target), clock=clock)
        policy.start()
        return policy
    return CurriculumPolicy(catalog, rank=min(rank, MAX_RANK))

"""Per-frame gesture recognition loop.

frame -> hand regions -> classification -> stabilizer -> confidence gate ->
match policy -> listeners. Everything runs on one thread, one frame per tick;
a new tick is only scheduled after the previous one has finished.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from ..core.entities import CommitEvent, MatchOutcome
from ..core.exceptions import HandSignError
from ..core.logging_config import CorrelationContext
from ..utils.geometry import rect_from_landmarks, select_region
from .prediction_stabilizer import PredictionStabilizer
from .sequence_matcher import GameMode, MatchPolicy, create_policy

logger = logging.getLogger(__name__)


class GestureSession:
    """Drives one recognition session and reports semantic events.

    Listeners:
        commit: ``{'label', 'all_committed', 'progress'}`` for every commit
        outcome: :class:`MatchOutcome` for every non-trivial policy result
        no_hands: no arguments, once per transition to "no hands visible"
        frame: ``{'label', 'confidence', 'progress'}`` for every classified frame

    A commit whose confidence is below ``acceptance_threshold`` is reported to
    ``commit`` listeners but never reaches the policy. It still counts as the
    stabilizer's last committed label, so holding the same sign again is not
    re-offered until a different sign commits or the hands leave view.
    """

    EVENTS = ("commit", "outcome", "no_hands", "frame")

    def __init__(self, frame_source, region_detector, classifier,
                 stabilizer: PredictionStabilizer, policy: MatchPolicy,
                 acceptance_threshold: float = 0.0,
                 clock: Callable[[], float] = time.monotonic,
                 session_id: Optional[str] = None,
                 fps: int = 30):
        self.frame_source = frame_source
        self.region_detector = region_detector
        self.classifier = classifier
        self.stabilizer = stabilizer
        self.policy = policy
        self.acceptance_threshold = acceptance_threshold
        self._clock = clock
        self.session_id = session_id or uuid.uuid4().hex[:12]
        self._listeners: Dict[str, List[Callable[..., None]]] = {name: [] for name in self.EVENTS}
        self._running = False
        self._scheduler = None
        self._after_id = None
        self._frame_period_ms = 1000 // max(1, fps)
        self._idle = False
        self._frames = 0
        self._commits = 0
        self._rejected = 0

    @classmethod
    def from_config(cls, config, mode, catalog=None, target: Optional[str] = None, rank: int = 0,
                    frame_source=None, region_detector=None, classifier=None,
                    load: bool = True, clock: Callable[[], float] = time.monotonic) -> "GestureSession":
        """Build a session for a game mode from config.

        Collaborators not passed in are created from config: an OpenCV camera,
        a MediaPipe hand detector and a Keras classifier (loaded unless
        ``load`` is False). The exam policy is started for ``rank``.

        Raises:
            SessionError: if the camera cannot be opened or every rank is passed
            ConfigError: if the sequence catalog is missing or malformed
            ModelError: if a model cannot be loaded
        """
        mode = GameMode(mode)
        if frame_source is None:
            from .camera import open_camera
            frame_source = open_camera(config)
        if region_detector is None:
            from .hand_region_service import MediaPipeHandDetector
            region_detector = MediaPipeHandDetector(
                max_num_hands=config.max_num_hands,
                min_detection_confidence=config.min_hand_detection_confidence,
            )
            if load:
                region_detector.load()
        if classifier is None:
            from .classifier_service import KerasSignClassifier
            classifier = KerasSignClassifier(
                config.classifier_model_path,
                class_names=config.classifier_labels or None,
                input_size=config.classifier_input_size,
                confidence_floor=config.classifier_floor,
            )
            if load:
                classifier.load_model()
        if catalog is None and mode is not GameMode.LEARN:
            from ..config.sequences import load_sequences
            catalog = load_sequences(config.sequences_path or None)

        policy = create_policy(mode, catalog, target=target, rank=rank, clock=clock)
        if mode is GameMode.EXAM:
            policy.start()

        return cls(
            frame_source, region_detector, classifier,
            PredictionStabilizer(config.stabilizer_threshold),
            policy,
            acceptance_threshold=config.acceptance_threshold(mode),
            clock=clock,
            fps=config.target_fps,
        )

    def add_listener(self, event: str, callback: Callable[..., None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown session event '{event}'. Expected one of {self.EVENTS}")
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable[..., None]) -> None:
        if callback in self._listeners.get(event, []):
            self._listeners[event].remove(callback)

    def set_policy(self, policy: MatchPolicy, acceptance_threshold: Optional[float] = None) -> None:
        """Switch game mode between ticks."""
        self.policy = policy
        if acceptance_threshold is not None:
            self.acceptance_threshold = acceptance_threshold

    def start(self, scheduler, fps: Optional[int] = None) -> None:
        """Start ticking on a scheduler exposing ``after(ms, fn)``/``after_cancel(id)``
        (a Tk root, for instance)."""
        if self._running:
            return
        if fps:
            self._frame_period_ms = 1000 // max(1, fps)
        self._scheduler = scheduler
        self._running = True
        logger.info(f"Gesture session {self.session_id} started")
        self._schedule(0)

    def stop(self) -> None:
        """Stop before the next tick and clear recognition state."""
        if not self._running:
            return
        self._running = False
        if self._after_id is not None and self._scheduler is not None:
            self._scheduler.after_cancel(self._after_id)
        self._after_id = None
        self.stabilizer.reset()
        logger.info(f"Gesture session {self.session_id} stopped after {self._frames} frames")

    def is_running(self) -> bool:
        return self._running

    def _schedule(self, delay_ms: int) -> None:
        if not self._running:
            return
        self._after_id = self._scheduler.after(max(1, delay_ms), self._tick)

    def _tick(self) -> None:
        """Execute one frame of the loop."""
        if not self._running:
            return
        self._after_id = None

        try:
            start = self._clock()
            ok, frame = self.frame_source.read()
            if not ok or frame is None:
                self._schedule(50)  # Retry in 50ms
                return

            self.process_frame(frame, timestamp_ms=start * 1000.0)

            latency_ms = int((self._clock() - start) * 1000)
            self._schedule(max(1, self._frame_period_ms - latency_ms))

        except HandSignError as e:
            logger.error(f"Gesture session {self.session_id} aborted: {type(e).__name__}: {e}")
            self.stop()
        except Exception as e:
            logger.error(f"Error in gesture session tick: {e}", exc_info=True)
            self._schedule(100)  # Retry in 100ms

    def process_frame(self, frame, timestamp_ms: Optional[float] = None) -> Optional[MatchOutcome]:
        """Run one frame through the pipeline.

        Returns:
            The policy outcome when a commit reached the policy, else None.
        """
        if timestamp_ms is None:
            timestamp_ms = self._clock() * 1000.0

        with CorrelationContext(self.session_id):
            self._frames += 1
            landmark_sets = self.region_detector.detect(frame, timestamp_ms)
            if not landmark_sets:
                self._handle_no_hands()
                return None
            self._idle = False

            region = select_region([rect_from_landmarks(points) for points in landmark_sets])
            if region is None:
                return None

            prediction = self.classifier.classify(frame, region)
            if prediction is None:
                self.stabilizer.step(None)
                return None

            commit = self.stabilizer.step(prediction.label, prediction.confidence)
            self._emit("frame", {
                'label': prediction.label,
                'confidence': prediction.confidence,
                'progress': self.stabilizer.progress,
            })
            if commit is None:
                return None
            return self._handle_commit(commit)

    def _handle_commit(self, commit: CommitEvent) -> Optional[MatchOutcome]:
        self._commits += 1
        self._emit("commit", {
            'label': commit.label,
            'all_committed': list(commit.committed),
            'progress': commit.progress,
        })

        if commit.confidence < self.acceptance_threshold:
            self._rejected += 1
            logger.debug(
                f"Commit '{commit.label}' rejected: confidence {commit.confidence:.2f} "
                f"< {self.acceptance_threshold:.2f}"
            )
            return None

        outcome = self.policy.advance(commit.label)
        if outcome.is_event:
            self._emit("outcome", outcome)
        return outcome

    def _handle_no_hands(self) -> None:
        self.stabilizer.reset()
        self.policy.on_signal_lost()
        if self._idle:
            return
        self._idle = True
        logger.debug("No hands in view")
        self._emit("no_hands")

    def _emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Error in '{event}' listener: {e}", exc_info=True)

    def get_stats(self) -> dict:
        """Get session statistics."""
        return {
            'session_id': self.session_id,
            'running': self._running,
            'frames': self._frames,
            'commits': self._commits,
            'rejected_commits': self._rejected,
            'committed': self.stabilizer.committed,
        }

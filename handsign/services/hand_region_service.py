"""MediaPipe hand landmark detection for the gesture session."""

import logging
from typing import List, Tuple

import cv2
import numpy as np

from ..core.exceptions import ModelError, ModelNotLoadedError

logger = logging.getLogger(__name__)

LandmarkSet = List[Tuple[float, float]]


class MediaPipeHandDetector:
    """Finds hands in video frames and returns their landmarks in pixels."""

    def __init__(self, max_num_hands: int = 2, min_detection_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5):
        self.max_num_hands = max_num_hands
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence
        self._hands = None

    def load(self) -> None:
        """Create the MediaPipe Hands solution.

        Raises:
            ModelError: if mediapipe is not installed
        """
        try:
            import mediapipe as mp
        except ImportError as e:
            raise ModelError("mediapipe not installed. Install with: pip install mediapipe") from e

        self._hands = mp.solutions.hands.Hands(
            static_image_mode=False,
            max_num_hands=self.max_num_hands,
            min_detection_confidence=self.min_detection_confidence,
            min_tracking_confidence=self.min_tracking_confidence,
        )
        logger.info(f"MediaPipe hand detector ready (max_num_hands={self.max_num_hands})")

    def detect(self, frame: np.ndarray, timestamp_ms: float = 0.0) -> List[LandmarkSet]:
        """Detect hands in a BGR frame.

        ``timestamp_ms`` is accepted for interface compatibility; the streaming
        Hands solution tracks frames by call order.
        """
        if self._hands is None:
            raise ModelNotLoadedError("Hand detector not loaded. Call load() first.")

        h, w = frame.shape[:2]
        results = self._hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        if not results.multi_hand_landmarks:
            return []

        return [
            [(lm.x * w, lm.y * h) for lm in hand_landmarks.landmark]
            for hand_landmarks in results.multi_hand_landmarks
        ]

    def close(self) -> None:
        if self._hands is not None:
            self._hands.close()
            self._hands = None

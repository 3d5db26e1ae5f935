"""Unit tests for MediaPipeHandDetector landmark conversion."""
from types import SimpleNamespace

import pytest

from handsign.core.exceptions import ModelNotLoadedError
from handsign.services.hand_region_service import MediaPipeHandDetector


class StubHands:
    def __init__(self, hands):
        self.hands = hands
        self.closed = False

    def process(self, rgb):
        if not self.hands:
            return SimpleNamespace(multi_hand_landmarks=None)
        return SimpleNamespace(multi_hand_landmarks=[
            SimpleNamespace(landmark=[SimpleNamespace(x=x, y=y) for x, y in points])
            for points in self.hands
        ])

    def close(self):
        self.closed = True


class TestMediaPipeHandDetector:
    """Test suite for the hand landmark adapter."""

    def test_detect_requires_load(self, frame):
        with pytest.raises(ModelNotLoadedError):
            MediaPipeHandDetector().detect(frame)

    def test_landmarks_scaled_to_pixels(self, frame):
        detector = MediaPipeHandDetector()
        detector._hands = StubHands([[(0.5, 0.5), (0.25, 1.0)]])

        hands = detector.detect(frame, 0.0)

        assert hands == [[(320.0, 240.0), (160.0, 480.0)]]

    def test_no_hands(self, frame):
        detector = MediaPipeHandDetector()
        detector._hands = StubHands([])
        assert detector.detect(frame) == []

    def test_close(self, frame):
        detector = MediaPipeHandDetector()
        stub = StubHands([])
        detector._hands = stub
        detector.close()
        assert stub.closed
        with pytest.raises(ModelNotLoadedError):
            detector.detect(frame)

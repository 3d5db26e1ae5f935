"""Pytest configuration and shared fixtures for the hand-sign engine.

Provides scripted stand-ins for the camera-side collaborators (hand region
detector, classifier, model backend) so every stage can be driven frame by
frame without a webcam or trained models.
"""
import sys
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import numpy as np
import pytest

# Add the project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from handsign.backends.base_backend import BaseBackend
from handsign.config.sequences import SequenceCatalog
from handsign.core.entities import Prediction


# Configure logging for tests
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)


class FakeBackend(BaseBackend):
    """Backend returning a fixed raw output and recording the input tensors."""

    def __init__(self, output: Optional[np.ndarray] = None, loaded: bool = True):
        super().__init__({})
        self.output = output
        self.is_loaded = loaded
        self.inputs: List[np.ndarray] = []

    def load_model(self, model_path: str) -> bool:
        self.is_loaded = True
        return True

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        self.inputs.append(tensor)
        return self.output

    def get_model_info(self) -> Dict:
        return {"backend": "fake"}

    def get_supported_formats(self) -> List[str]:
        return [".fake"]

    def validate_model(self, model_path: str) -> bool:
        return True


class ScriptedRegionDetector:
    """Returns one landmark-set list per call, from a script."""

    ONE_HAND = [[(10.0, 10.0), (50.0, 60.0)]]

    def __init__(self, script: Iterable[List] = ()):
        self.script = list(script)
        self.calls = 0

    def detect(self, frame, timestamp_ms):
        self.calls += 1
        if self.script:
            return self.script.pop(0)
        return self.ONE_HAND


class ScriptedClassifier:
    """Returns predictions from a script of (label, confidence) pairs or None."""

    def __init__(self, script: Iterable = ()):
        self.script = list(script)
        self.regions = []

    def classify(self, frame, rect):
        self.regions.append(rect)
        item = self.script.pop(0) if self.script else None
        if item is None:
            return None
        label, confidence = item
        return Prediction(label=label, confidence=confidence)


def hold(label: str, frames: int, confidence: float = 0.99) -> List:
    """Classifier script holding one sign for ``frames`` frames."""
    return [(label, confidence)] * frames


@pytest.fixture
def frame():
    """Blank BGR video frame."""
    return np.zeros((480, 640, 3), dtype=np.uint8)


@pytest.fixture
def catalog():
    """Small leveled catalog (two genin targets, one chunin target, one free target)."""
    return SequenceCatalog.from_data([
        {"id": "a", "name": "Alpha", "level": "genin", "sequence": ["Tora", "I"]},
        {"id": "b", "name": "Beta", "level": "genin", "sequence": ["Inu", "Mi", "Ne"]},
        {"id": "c", "name": "Gamma", "level": "chunin", "sequence": ["Uma", "Tora"]},
        {"id": "d", "name": "Delta", "sequence": ["Tora", "Mi"]},
    ])


@pytest.fixture
def fake_backend():
    return FakeBackend()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()

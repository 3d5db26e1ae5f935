"""
Hand-sign recognition engine: object-detection post-processing and
temporal gesture-sequence recognition.
"""

__version__ = "1.0.0"
__author__ = "Hand Sign Dev Team"

from .config.settings import Config, load_config, save_config
from .core.entities import Detection, GridEntry, Prediction, CommitEvent, MatchOutcome

__all__ = [
    "Config", "load_config", "save_config",
    "Detection", "GridEntry", "Prediction", "CommitEvent", "MatchOutcome"
]

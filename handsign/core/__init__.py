"""Core domain entities and constants."""

from .entities import (
    BBox, GridEntry, Detection, Rect, Prediction, CommitEvent,
    SequenceTarget, OutcomeKind, MatchOutcome, RankLevel
)
from .exceptions import (
    HandSignError, ConfigError, SequenceConfigError, ModelError,
    ModelNotLoadedError, DetectionError, TensorShapeError, SessionError
)
from .constants import SIGN_DICTIONARY, DETECTOR_LABELS, RANK_LEVELS, MAX_RANK

__all__ = [
    "BBox", "GridEntry", "Detection", "Rect", "Prediction", "CommitEvent",
    "SequenceTarget", "OutcomeKind", "MatchOutcome", "RankLevel",
    "HandSignError", "ConfigError", "SequenceConfigError", "ModelError",
    "ModelNotLoadedError", "DetectionError", "TensorShapeError", "SessionError",
    "SIGN_DICTIONARY", "DETECTOR_LABELS", "RANK_LEVELS", "MAX_RANK"
]

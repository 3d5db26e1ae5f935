"""Detection and gesture recognition services."""

from .postprocess import build_grids, decode_outputs, suppress, GridCache
from .detection_service import DetectionPipeline
from .prediction_stabilizer import PredictionStabilizer
from .sequence_matcher import (
    GameMode, MatchPolicy, FullMatchPolicy, StepPolicy, CurriculumPolicy,
    SignDrillPolicy, create_policy
)
from .gesture_session import GestureSession
from .progress_store import ProgressStore, ProgressRecorder
from .camera import open_camera

__all__ = [
    "build_grids", "decode_outputs", "suppress", "GridCache",
    "DetectionPipeline", "PredictionStabilizer",
    "GameMode", "MatchPolicy", "FullMatchPolicy", "StepPolicy", "CurriculumPolicy",
    "SignDrillPolicy", "create_policy",
    "GestureSession", "ProgressStore", "ProgressRecorder", "open_camera"
]

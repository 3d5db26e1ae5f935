"""Detection pipeline: letterbox, inference, decode, suppress, rescale."""
from __future__ import annotations

import logging
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..backends.base_backend import BaseBackend
from ..core.constants import DEFAULT_STRIDES, DETECTOR_LABELS
from ..core.entities import Detection
from ..core.exceptions import ModelNotLoadedError, TensorShapeError
from ..utils.image_utils import letterbox, to_input_tensor
from .postprocess import GridCache, decode_outputs, suppress

logger = logging.getLogger(__name__)


class DetectionPipeline:
    """Standalone hand-sign object detector.

    The caller loads the backend's model before calling :meth:`detect`.
    Each call runs to completion (inference, decode, suppress) before it
    returns, so a frame loop driving it never has two detections in flight.
    """

    def __init__(self, backend: BaseBackend,
                 input_size: Tuple[int, int] = (416, 416),
                 strides: Sequence[int] = DEFAULT_STRIDES,
                 labels: Optional[Sequence[str]] = None,
                 score_threshold: float = 0.45,
                 nms_threshold: float = 0.45):
        """Initialize the pipeline.

        Args:
            backend: model backend producing the raw anchor tensor
            input_size: model input (width, height)
            strides: downsampling strides in the network's output order
            labels: class label table
            score_threshold: minimum objectness and final score
            nms_threshold: IoU above which lower-scoring boxes are suppressed
        """
        self.backend = backend
        self.input_width, self.input_height = (int(v) for v in input_size)
        self.strides = tuple(int(s) for s in strides)
        self.labels = list(labels) if labels is not None else list(DETECTOR_LABELS)
        self.score_threshold = score_threshold
        self.nms_threshold = nms_threshold
        self._grids = GridCache()
        self._calls = 0
        self._last_latency_ms = 0.0
        self._last_count = 0

    @classmethod
    def from_config(cls, config, backend: Optional[BaseBackend] = None, load: bool = True) -> "DetectionPipeline":
        """Build a pipeline (and by default an ONNX backend with its model loaded) from config."""
        if backend is None:
            from ..backends.onnx_backend import OnnxBackend
            backend = OnnxBackend({"execution_providers": config.execution_providers})
        if load and not backend.is_model_loaded():
            backend.load_model(config.model_path)
        return cls(
            backend,
            input_size=(config.input_width, config.input_height),
            strides=config.strides,
            labels=config.labels or None,
            score_threshold=config.score_threshold,
            nms_threshold=config.nms_threshold,
        )

    def detect(self, image: np.ndarray) -> List[Detection]:
        """Detect hand signs in a BGR image.

        Returns:
            Detections in source-image pixel coordinates, highest score first.

        Raises:
            ModelNotLoadedError: if the backend has no model loaded
            TensorShapeError: if the model output does not fit the configured shape/labels
        """
        if not self.backend.is_model_loaded():
            raise ModelNotLoadedError("Model not loaded. Load the backend model before calling detect().")

        start = time.perf_counter()
        canvas, scale = letterbox(image, self.input_width, self.input_height)
        raw_output = self.backend.infer(to_input_tensor(canvas))

        grids = self._grids.get(self.input_width, self.input_height, self.strides)
        try:
            candidates = decode_outputs(
                raw_output, grids, self.score_threshold,
                labels=self.labels, num_classes=len(self.labels)
            )
        except TensorShapeError as e:
            logger.error(f"Model output rejected: {e}")
            raise

        kept = suppress(candidates, self.nms_threshold)
        detections = [d.scaled(scale) for d in kept]

        self._calls += 1
        self._last_latency_ms = (time.perf_counter() - start) * 1000.0
        self._last_count = len(detections)
        logger.debug(
            f"Detected {len(detections)} boxes ({len(candidates)} candidates) "
            f"in {self._last_latency_ms:.1f}ms"
        )
        return detections

    def get_stats(self) -> dict:
        """Get pipeline statistics."""
        return {
            'calls': self._calls,
            'last_latency_ms': self._last_latency_ms,
            'last_detection_count': self._last_count,
            'cached_grid_tables': len(self._grids),
            'model_loaded': self.backend.is_model_loaded(),
        }

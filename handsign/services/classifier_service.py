"""Keras hand-sign classifier (Teachable Machine image model export)."""

import logging
from typing import List, Optional, Sequence

import cv2
import numpy as np

from ..core.constants import SIGN_DICTIONARY
from ..core.entities import Prediction, Rect
from ..core.exceptions import ModelError, ModelNotLoadedError
from ..utils.image_utils import crop_region

logger = logging.getLogger(__name__)


class KerasSignClassifier:
    """
    Classifies the hand region of a frame into one sign token.

    Usage:
        classifier = KerasSignClassifier("keras_model.h5")
        classifier.load_model()
        prediction = classifier.classify(frame, rect)
    """

    def __init__(self, model_path: str, class_names: Optional[Sequence[str]] = None,
                 input_size: int = 224, confidence_floor: float = 0.5, padding: float = 0.1):
        """
        Args:
            model_path: Path to the trained Keras model
            class_names: Output index -> sign token (default: sign dictionary order)
            input_size: Square model input size in pixels
            confidence_floor: Predictions below this are reported as no prediction
            padding: Fraction of the region size added around the crop
        """
        self.model_path = model_path
        self.class_names: List[str] = list(class_names) if class_names else list(SIGN_DICTIONARY)
        self.input_size = input_size
        self.confidence_floor = confidence_floor
        self.padding = padding
        self.model = None

    def load_model(self) -> None:
        try:
            from tensorflow.keras.models import load_model
        except ImportError as e:
            raise ModelError("tensorflow not installed. Install with: pip install tensorflow") from e

        try:
            self.model = load_model(self.model_path, compile=False)
        except Exception as e:
            raise ModelError(f"Failed to load classifier {self.model_path}: {e}") from e

        outputs = self.model.output_shape[-1]
        if outputs != len(self.class_names):
            raise ModelError(
                f"Classifier has {outputs} outputs but {len(self.class_names)} class names are configured"
            )
        logger.info(f"Classifier loaded: {self.model_path} ({outputs} classes)")

    def preprocess(self, image: np.ndarray, rect: Rect) -> Optional[np.ndarray]:
        """Crop, grayscale, resize and scale to [-1, 1] as a batch of one."""
        crop = crop_region(image, rect, padding=self.padding)
        if crop is None:
            return None
        gray = cv2.cvtColor(crop, cv2.COLOR_BGR2GRAY) if crop.ndim == 3 else crop
        resized = cv2.resize(gray, (self.input_size, self.input_size), interpolation=cv2.INTER_AREA)
        rgb = cv2.cvtColor(resized, cv2.COLOR_GRAY2RGB).astype(np.float32)
        return np.expand_dims(rgb / 127.5 - 1.0, axis=0)

    def classify(self, image: np.ndarray, rect: Rect) -> Optional[Prediction]:
        if self.model is None:
            raise ModelNotLoadedError("Classifier not loaded. Call load_model() first.")

        batch = self.preprocess(image, rect)
        if batch is None:
            return None

        scores = np.asarray(self.model.predict(batch, verbose=0))[0]
        class_idx = int(np.argmax(scores))
        confidence = float(scores[class_idx])
        if confidence < self.confidence_floor:
            return None
        return Prediction(label=self.class_names[class_idx], confidence=confidence)

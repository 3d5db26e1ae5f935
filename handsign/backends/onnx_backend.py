"""ONNX Runtime backend for the YOLOX hand-sign detector."""
import os
import logging
from typing import List, Dict, Any, Optional, Sequence

import numpy as np

from .base_backend import BaseBackend
from ..core.exceptions import ModelError, ModelNotLoadedError

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS = ("CPUExecutionProvider",)


class OnnxBackend(BaseBackend):
    """Runs a raw-output ONNX model through ``onnxruntime.InferenceSession``."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config or {})
        self.session = None
        self.model_path: Optional[str] = None
        self.providers: Sequence[str] = tuple(self.config.get("execution_providers") or DEFAULT_PROVIDERS)

    def load_model(self, model_path: str) -> bool:
        """Create an inference session for ``model_path``.

        Raises:
            ModelError: if onnxruntime is missing or the model cannot be loaded
        """
        try:
            import onnxruntime as ort
        except ImportError as e:
            raise ModelError("onnxruntime not installed. Install with: pip install onnxruntime") from e

        if not os.path.isfile(model_path):
            raise ModelError(f"Model file not found: {model_path}")

        try:
            available = set(ort.get_available_providers())
            providers = [p for p in self.providers if p in available] or list(DEFAULT_PROVIDERS)
            self.session = ort.InferenceSession(model_path, providers=providers)
        except Exception as e:
            self.is_loaded = False
            self.session = None
            raise ModelError(f"Failed to load ONNX model {model_path}: {e}") from e

        self.model_path = model_path
        self.is_loaded = True

        inputs = self.session.get_inputs()
        outputs = self.session.get_outputs()
        self.model_info = {
            "backend": "onnxruntime",
            "model_path": model_path,
            "providers": self.session.get_providers(),
            "input_name": inputs[0].name,
            "input_shape": inputs[0].shape,
            "output_name": outputs[0].name,
            "output_shape": outputs[0].shape,
        }
        logger.info(f"ONNX model loaded: {model_path} (input {inputs[0].shape}, output {outputs[0].shape})")
        return True

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        if not self.is_loaded or self.session is None:
            raise ModelNotLoadedError("No model loaded. Call load_model() first.")

        input_name = self.session.get_inputs()[0].name
        output_name = self.session.get_outputs()[0].name
        try:
            results = self.session.run([output_name], {input_name: tensor})
        except Exception as e:
            raise ModelError(f"ONNX inference failed: {e}") from e
        return np.asarray(results[0])

    def get_model_info(self) -> Dict[str, Any]:
        if not self.is_loaded:
            return {"status": "not_loaded"}
        return self.model_info.copy()

    def get_supported_formats(self) -> List[str]:
        return [".onnx"]

    def validate_model(self, model_path: str) -> bool:
        _, ext = os.path.splitext(model_path.lower())
        if ext not in self.get_supported_formats():
            return False
        return os.path.isfile(model_path) and os.access(model_path, os.R_OK)

    def unload_model(self) -> None:
        self.session = None
        super().unload_model()
        self.model_path = None

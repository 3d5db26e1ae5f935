"""Model backends."""
from .base_backend import BaseBackend
from .onnx_backend import OnnxBackend

__all__ = ["BaseBackend", "OnnxBackend"]

"""Unit tests for OnnxBackend error paths."""
import numpy as np
import pytest

from handsign.backends.onnx_backend import OnnxBackend
from handsign.core.exceptions import ModelError, ModelNotLoadedError


class TestOnnxBackend:
    """Test suite for the ONNX Runtime backend."""

    def test_initial_state(self):
        backend = OnnxBackend()
        assert not backend.is_model_loaded()
        assert backend.get_model_info() == {"status": "not_loaded"}
        assert backend.providers == ("CPUExecutionProvider",)

    def test_providers_from_config(self):
        backend = OnnxBackend({"execution_providers": ["CUDAExecutionProvider"]})
        assert backend.providers == ("CUDAExecutionProvider",)

    def test_infer_requires_model(self):
        with pytest.raises(ModelNotLoadedError):
            OnnxBackend().infer(np.zeros((1, 3, 416, 416), dtype=np.float32))

    def test_missing_model_file(self, tmp_path):
        with pytest.raises(ModelError):
            OnnxBackend().load_model(str(tmp_path / "absent.onnx"))

    def test_corrupt_model_file(self, tmp_path):
        path = tmp_path / "broken.onnx"
        path.write_bytes(b"not a model")
        backend = OnnxBackend()
        with pytest.raises(ModelError):
            backend.load_model(str(path))
        assert not backend.is_model_loaded()

    def test_validate_model(self, tmp_path):
        path = tmp_path / "model.onnx"
        path.write_bytes(b"")
        backend = OnnxBackend()
        assert backend.validate_model(str(path))
        assert not backend.validate_model(str(tmp_path / "model.pt"))
        assert not backend.validate_model(str(tmp_path / "absent.onnx"))

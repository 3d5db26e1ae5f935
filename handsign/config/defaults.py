"""Default configuration values."""

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    # Detector settings
    "model_path": "data/models/yolox_nano.onnx",
    "input_width": 416,
    "input_height": 416,
    "strides": [8, 16, 32],
    "score_threshold": 0.45,  # 0.0 to 1.0
    "nms_threshold": 0.45,  # 0.0 to 1.0
    "labels": [],  # Empty: built-in detector label table
    "execution_providers": ["CPUExecutionProvider"],

    # Gesture recognition settings
    "stabilizer_threshold": 5,  # Consecutive identical frames before a commit
    "learn_confidence": 0.85,
    "explore_confidence": 0.85,
    "practice_confidence": 0.88,
    "exam_confidence": 0.92,
    "sequences_path": "",  # Empty: bundled jutsus.json
    "classifier_model_path": "data/models/keras_model.h5",
    "classifier_labels": [],  # Empty: sign dictionary order
    "classifier_input_size": 224,
    "classifier_floor": 0.5,
    "max_num_hands": 2,
    "min_hand_detection_confidence": 0.5,

    # Camera settings
    "camera_width": 640,
    "camera_height": 480,
    "target_fps": 30,

    # Progress persistence
    "progress_path": "data/progress.json",
    "history_limit": 100,

    # Debug and Logging Settings
    "debug": False,
    "log_level": "INFO",
    "log_dir": "",
    "structured_logging": False,
}

"""Settings validation utilities and types."""

from __future__ import annotations
from typing import Any, Optional
from dataclasses import dataclass


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    is_valid: bool
    error_message: Optional[str] = None
    corrected_value: Optional[Any] = None


class SettingsValidator:
    """Settings validation with auto-correction."""

    VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    UNIT_INTERVAL_KEYS = [
        "score_threshold", "nms_threshold",
        "learn_confidence", "explore_confidence", "practice_confidence", "exam_confidence",
        "classifier_floor", "min_hand_detection_confidence",
    ]

    POSITIVE_INT_KEYS = [
        "input_width", "input_height", "stabilizer_threshold", "classifier_input_size",
        "max_num_hands", "camera_width", "camera_height", "target_fps", "history_limit",
    ]

    @staticmethod
    def validate_unit_interval(value: Any, default: float) -> ValidationResult:
        """Validate a probability-like threshold in [0, 1]."""
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ValidationResult(False, f"Expected a number, got {value!r}", default)
        if not 0.0 <= value <= 1.0:
            return ValidationResult(
                False,
                f"Value {value} out of range [0.0, 1.0]",
                min(1.0, max(0.0, float(value)))
            )
        return ValidationResult(True)

    @staticmethod
    def validate_positive_int(value: Any, default: int) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, int):
            return ValidationResult(False, f"Expected an integer, got {value!r}", default)
        if value < 1:
            return ValidationResult(False, f"Value {value} must be >= 1", default)
        return ValidationResult(True)

    @staticmethod
    def validate_strides(value: Any, default: list) -> ValidationResult:
        if not isinstance(value, (list, tuple)) or not value:
            return ValidationResult(False, "Strides must be a non-empty list", default)
        if any(isinstance(s, bool) or not isinstance(s, int) or s < 1 for s in value):
            return ValidationResult(False, f"Strides must be positive integers, got {value!r}", default)
        return ValidationResult(True)

    @staticmethod
    def validate_log_level(value: Any) -> ValidationResult:
        if not isinstance(value, str) or value.upper() not in SettingsValidator.VALID_LOG_LEVELS:
            return ValidationResult(
                False,
                f"Invalid log level {value!r}. Must be one of: {', '.join(SettingsValidator.VALID_LOG_LEVELS)}",
                "INFO"
            )
        return ValidationResult(True)

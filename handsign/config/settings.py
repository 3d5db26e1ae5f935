"""Configuration dataclass and loading utilities.

Provides a strongly-typed configuration object that is injected into the
detection pipeline and gesture sessions instead of module-level globals.
Values come from ``DEFAULT_CONFIG``, then a JSON file, then ``HANDSIGN_*``
environment variables.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import json, os, logging
from .defaults import DEFAULT_CONFIG
from .validation import SettingsValidator

ENV_PREFIX = "HANDSIGN_"

# Environment overrides: variable suffix -> (config key, parser)
_ENV_OVERRIDES = {
    "MODEL_PATH": ("model_path", str),
    "SEQUENCES_PATH": ("sequences_path", str),
    "CLASSIFIER_MODEL_PATH": ("classifier_model_path", str),
    "PROGRESS_PATH": ("progress_path", str),
    "STABILIZER_THRESHOLD": ("stabilizer_threshold", int),
    "SCORE_THRESHOLD": ("score_threshold", float),
    "NMS_THRESHOLD": ("nms_threshold", float),
    "LOG_LEVEL": ("log_level", str),
    "LOG_DIR": ("log_dir", str),
}


@dataclass(slots=True)
class Config:
    # Detector settings
    model_path: str = DEFAULT_CONFIG["model_path"]
    input_width: int = DEFAULT_CONFIG["input_width"]
    input_height: int = DEFAULT_CONFIG["input_height"]
    strides: List[int] = field(default_factory=lambda: list(DEFAULT_CONFIG["strides"]))
    score_threshold: float = DEFAULT_CONFIG["score_threshold"]
    nms_threshold: float = DEFAULT_CONFIG["nms_threshold"]
    labels: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["labels"]))
    execution_providers: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["execution_providers"]))

    # Gesture recognition settings
    stabilizer_threshold: int = DEFAULT_CONFIG["stabilizer_threshold"]
    learn_confidence: float = DEFAULT_CONFIG["learn_confidence"]
    explore_confidence: float = DEFAULT_CONFIG["explore_confidence"]
    practice_confidence: float = DEFAULT_CONFIG["practice_confidence"]
    exam_confidence: float = DEFAULT_CONFIG["exam_confidence"]
    sequences_path: str = DEFAULT_CONFIG["sequences_path"]
    classifier_model_path: str = DEFAULT_CONFIG["classifier_model_path"]
    classifier_labels: List[str] = field(default_factory=lambda: list(DEFAULT_CONFIG["classifier_labels"]))
    classifier_input_size: int = DEFAULT_CONFIG["classifier_input_size"]
    classifier_floor: float = DEFAULT_CONFIG["classifier_floor"]
    max_num_hands: int = DEFAULT_CONFIG["max_num_hands"]
    min_hand_detection_confidence: float = DEFAULT_CONFIG["min_hand_detection_confidence"]

    # Camera settings
    camera_width: int = DEFAULT_CONFIG["camera_width"]
    camera_height: int = DEFAULT_CONFIG["camera_height"]
    target_fps: int = DEFAULT_CONFIG["target_fps"]

    # Progress persistence
    progress_path: str = DEFAULT_CONFIG["progress_path"]
    history_limit: int = DEFAULT_CONFIG["history_limit"]

    # Debug and logging
    debug: bool = DEFAULT_CONFIG["debug"]
    log_level: str = DEFAULT_CONFIG["log_level"]
    log_dir: str = DEFAULT_CONFIG["log_dir"]
    structured_logging: bool = DEFAULT_CONFIG["structured_logging"]

    # Arbitrary extra values retained for forward compatibility
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        # merge extra keys at top-level for saving
        extra = d.pop("extra", {})
        d.update(extra)
        return d

    def get(self, key: str, default: Any = None) -> Any:
        if hasattr(self, key) and key != "extra":
            return getattr(self, key)
        return self.extra.get(key, default)

    def acceptance_threshold(self, mode) -> float:
        """Minimum commit confidence for a game mode (``GameMode`` or its value)."""
        mode_name = getattr(mode, "value", mode)
        try:
            return getattr(self, f"{mode_name}_confidence")
        except AttributeError:
            raise ValueError(f"Unknown game mode: {mode_name!r}") from None


def load_config(path: str = "config.json") -> Config:
    """Load configuration from JSON file with error handling and environment overrides.

    A missing, empty or malformed file is logged and replaced by defaults;
    out-of-range values are corrected with a warning.

    Args:
        path: Path to config.json file

    Returns:
        Config: Loaded and validated configuration
    """
    data: Dict[str, Any] = {}

    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded_data = json.load(f)
            if loaded_data is None:
                logging.warning(f"Configuration file '{path}' is empty, using defaults")
            elif not isinstance(loaded_data, dict):
                logging.error(f"Configuration file '{path}' does not contain a valid JSON object, using defaults")
            else:
                data = loaded_data
                logging.info(f"Successfully loaded configuration from '{path}'")
        except json.JSONDecodeError as e:
            logging.error(f"Failed to parse JSON configuration file '{path}': {e}. Using defaults.")
        except PermissionError:
            logging.error(f"Permission denied reading configuration file '{path}'. Using defaults.")
        except OSError as e:
            logging.error(f"Error reading configuration file '{path}': {e}. Using defaults.")
    else:
        logging.info(f"Configuration file '{path}' does not exist. Using defaults.")

    merged = {**DEFAULT_CONFIG, **data}
    merged = _apply_environment_overrides(merged)
    merged = _validate_config_values(merged)

    # capture unknown keys
    field_names = [k for k in Config.__annotations__ if k != "extra"]
    extra = {k: v for k, v in merged.items() if k not in field_names}
    if extra:
        logging.info(f"Found extra configuration keys: {list(extra.keys())}")

    return Config(**{k: merged[k] for k in field_names}, extra=extra)


def save_config(cfg: Config, path: str = "config.json") -> None:
    """Save configuration to JSON file."""
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg.to_dict(), f, indent=2, ensure_ascii=False)
        logging.info(f"Configuration saved successfully to '{path}'")
    except PermissionError:
        logging.error(f"Permission denied writing configuration file '{path}'")
        raise
    except OSError as e:
        logging.error(f"OS error saving configuration file '{path}': {e}")
        raise


def _apply_environment_overrides(config_dict: Dict[str, Any],
                                 environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Apply ``HANDSIGN_*`` environment variable overrides to configuration."""
    environ = os.environ if environ is None else environ
    result = dict(config_dict)
    for suffix, (key, parser) in _ENV_OVERRIDES.items():
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is None or raw == "":
            continue
        try:
            result[key] = parser(raw)
            logging.debug(f"Environment override applied: {key}")
        except ValueError:
            logging.warning(f"Ignoring invalid value for {ENV_PREFIX + suffix}: {raw!r}")

    if environ.get(ENV_PREFIX + "DEBUG", "").lower() in ("1", "true", "yes"):
        result["debug"] = True
        result["log_level"] = "DEBUG"
    return result


def _validate_config_values(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Validate numeric ranges, correcting invalid values with a warning."""
    validated = dict(config_dict)

    for key in SettingsValidator.UNIT_INTERVAL_KEYS:
        result = SettingsValidator.validate_unit_interval(validated.get(key), DEFAULT_CONFIG[key])
        if not result.is_valid:
            logging.warning(f"Invalid {key}: {result.error_message}; using {result.corrected_value}")
            validated[key] = result.corrected_value

    for key in SettingsValidator.POSITIVE_INT_KEYS:
        result = SettingsValidator.validate_positive_int(validated.get(key), DEFAULT_CONFIG[key])
        if not result.is_valid:
            logging.warning(f"Invalid {key}: {result.error_message}; using {result.corrected_value}")
            validated[key] = result.corrected_value

    result = SettingsValidator.validate_strides(validated.get("strides"), list(DEFAULT_CONFIG["strides"]))
    if not result.is_valid:
        logging.warning(f"Invalid strides: {result.error_message}; using {result.corrected_value}")
        validated["strides"] = result.corrected_value

    result = SettingsValidator.validate_log_level(validated.get("log_level"))
    if not result.is_valid:
        logging.warning(result.error_message)
        validated["log_level"] = result.corrected_value

    for key in ("labels", "classifier_labels", "execution_providers"):
        value = validated.get(key)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            logging.warning(f"Invalid {key}: expected a list of strings; using default")
            validated[key] = list(DEFAULT_CONFIG[key])

    return validated

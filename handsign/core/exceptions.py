"""Custom exceptions for the hand-sign engine."""


class HandSignError(Exception):
    """Base application error."""
    pass


class ConfigError(HandSignError):
    """Configuration-related errors. Fatal at load time."""
    pass


class SequenceConfigError(ConfigError):
    """Malformed target sequence catalog."""
    pass


class ModelError(HandSignError):
    """Model loading/inference errors."""
    pass


class ModelNotLoadedError(ModelError):
    """Raised when inference is requested before a model is loaded."""
    pass


class DetectionError(HandSignError):
    """Base exception for detection-related errors."""
    pass


class TensorShapeError(DetectionError):
    """Raw output tensor does not match the grid table or label count."""
    pass


class SessionError(HandSignError):
    """Gesture session misuse."""
    pass

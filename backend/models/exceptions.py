"""Custom exceptions for model loading and prediction layers."""


class PredictionError(Exception):
    """Base class for prediction-related failures."""


class ArtifactNotFound(PredictionError):
    """Raised when a model artifact path does not resolve to a readable file."""


class ArtifactLoadError(PredictionError):
    """Raised when an artifact exists but cannot be parsed or initialized."""


class ShapeMismatch(PredictionError):
    """Raised when a feature vector does not match the artifact input shape."""


class InferenceError(PredictionError):
    """Raised when the loaded artifact fails while scoring a feature vector."""


class InferenceUnavailable(PredictionError):
    """Raised when no model is usable for a task and fallback is not permitted."""

    def __init__(self, task: str, message: str = "") -> None:
        self.task = task
        self.error_type = "{0}_UNAVAILABLE".format(task.replace("-", "_").upper())
        super().__init__(message or "Model for task '{0}' is not available and fallback is disabled.".format(task))

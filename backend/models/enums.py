"""Reusable enums for prediction models and responses."""

from enum import Enum


class StringEnum(str, Enum):
    """Base enum class with string behavior for JSON serialization."""


class PredictionTask(StringEnum):
    """Prediction tasks served by the API."""

    CHURN_KNN = "churn-knn"
    CHURN_LOGREG = "churn-logreg"
    CREDIT_KMEANS = "credit-kmeans"


class InferencePath(StringEnum):
    """Inference path selected for a task orchestrator."""

    PENDING = "PENDING"
    MODEL_BACKED = "MODEL_BACKED"
    FALLBACK_ONLY = "FALLBACK_ONLY"


class FallbackPolicy(StringEnum):
    """Whether a task consults the fallback setting or always falls back."""

    CONFIGURED = "CONFIGURED"
    ALWAYS = "ALWAYS"


class PredictionSource(StringEnum):
    """Which path produced a prediction result."""

    MODEL = "model"
    FALLBACK = "fallback"


class RiskLevel(StringEnum):
    """Risk level attached to a customer segment."""

    LOW = "bajo"
    MEDIUM = "medio"
    HIGH = "alto"

"""Shared enums and exceptions for the prediction service."""

from .enums import FallbackPolicy, InferencePath, PredictionSource, PredictionTask, RiskLevel, StringEnum
from .exceptions import (
    ArtifactLoadError,
    ArtifactNotFound,
    InferenceError,
    InferenceUnavailable,
    PredictionError,
    ShapeMismatch,
)

__all__ = [
    "StringEnum",
    "PredictionTask",
    "InferencePath",
    "FallbackPolicy",
    "PredictionSource",
    "RiskLevel",
    "PredictionError",
    "ArtifactNotFound",
    "ArtifactLoadError",
    "ShapeMismatch",
    "InferenceError",
    "InferenceUnavailable",
]

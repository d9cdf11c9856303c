"""ML package namespace."""

from .churn_inference import ChurnKnnService, ChurnLogRegService
from .credit_inference import CreditSegmentationService
from .interpreter import SegmentCatalog
from .model_loader import ModelHandle, ModelRegistry, get_model_registry
from .schema import (
    ChurnPredictionRequest,
    ChurnPredictionResult,
    CreditSegmentationRequest,
    CreditSegmentationResult,
    SegmentDescriptor,
)
from .session import InferenceSession, RawInferenceOutput

__all__ = [
    "ChurnKnnService",
    "ChurnLogRegService",
    "CreditSegmentationService",
    "SegmentCatalog",
    "ModelHandle",
    "ModelRegistry",
    "get_model_registry",
    "InferenceSession",
    "RawInferenceOutput",
    "ChurnPredictionRequest",
    "ChurnPredictionResult",
    "CreditSegmentationRequest",
    "CreditSegmentationResult",
    "SegmentDescriptor",
]

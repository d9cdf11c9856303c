"""Churn prediction services backed by KNN and logistic regression artifacts."""

from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from models.enums import FallbackPolicy, PredictionSource, PredictionTask

from .fallback import churn_message, decide_churn, score_churn_knn, score_churn_logreg
from .interpreter import interpret_churn_output, round_probability
from .model_loader import ModelHandle
from .orchestrator import PredictionOrchestrator
from .preprocessing import encode_churn_features
from .schema import ChurnPredictionRequest, ChurnPredictionResult
from .session import RawInferenceOutput


logger = logging.getLogger(__name__)


class ChurnPredictionService(PredictionOrchestrator[ChurnPredictionRequest, ChurnPredictionResult]):
    """Shared churn flow; subclasses pick the model name and fallback score."""

    model_name: str
    fallback_score: Callable[[ChurnPredictionRequest], float]

    def encode(self, request: ChurnPredictionRequest) -> np.ndarray:
        return encode_churn_features(request)

    def interpret(
        self,
        raw: RawInferenceOutput,
        request: ChurnPredictionRequest,
        vector: np.ndarray,
        handle: ModelHandle,
    ) -> ChurnPredictionResult:
        return interpret_churn_output(self.model_name, raw, source=PredictionSource.MODEL)

    def _predict_with_fallback(self, request: ChurnPredictionRequest) -> ChurnPredictionResult:
        score = self.fallback_score(request)
        prediction, class_probability = decide_churn(score)
        logger.debug(
            "Fallback churn decision task=%s score=%.4f prediction=%d",
            self.task.value,
            score,
            prediction,
        )
        return ChurnPredictionResult(
            model=self.model_name,
            prediction=prediction,
            probability=round_probability(class_probability),
            message=churn_message(prediction, class_probability),
            source=PredictionSource.FALLBACK,
        )


class ChurnKnnService(ChurnPredictionService):
    """Churn prediction with the KNN artifact; fallback follows configuration."""

    task = PredictionTask.CHURN_KNN
    fallback_policy = FallbackPolicy.CONFIGURED
    model_name = "knn"
    fallback_score = staticmethod(score_churn_knn)


class ChurnLogRegService(ChurnPredictionService):
    """Churn prediction with the logistic regression artifact; always falls back."""

    task = PredictionTask.CHURN_LOGREG
    fallback_policy = FallbackPolicy.ALWAYS
    model_name = "logistic_regression"
    fallback_score = staticmethod(score_churn_logreg)

"""Prediction API routes for churn and credit segmentation."""

from __future__ import annotations

from fastapi import APIRouter

from ml.churn_inference import ChurnKnnService, ChurnLogRegService
from ml.credit_inference import CreditSegmentationService
from ml.schema import (
    ChurnPredictionRequest,
    ChurnPredictionResult,
    CreditSegmentationRequest,
    CreditSegmentationResult,
)


def build_prediction_router(
    churn_knn: ChurnKnnService,
    churn_logreg: ChurnLogRegService,
    credit_kmeans: CreditSegmentationService,
) -> APIRouter:
    """Build prediction routes around already constructed services."""
    router = APIRouter(prefix="/api", tags=["predictions"])

    @router.post("/churn/knn", summary="Predict churn with KNN", response_model=ChurnPredictionResult)
    def predict_churn_knn(payload: ChurnPredictionRequest) -> ChurnPredictionResult:
        """Predict churn using the KNN model or its rule-based fallback."""
        return churn_knn.predict(payload)

    @router.post(
        "/churn/logreg",
        summary="Predict churn with logistic regression",
        response_model=ChurnPredictionResult,
    )
    def predict_churn_logreg(payload: ChurnPredictionRequest) -> ChurnPredictionResult:
        """Predict churn using the logistic regression model or its rule-based fallback."""
        return churn_logreg.predict(payload)

    @router.post(
        "/credit/kmeans",
        summary="Segment a credit-card customer",
        response_model=CreditSegmentationResult,
        response_model_exclude_none=True,
    )
    def predict_credit_kmeans(payload: CreditSegmentationRequest) -> CreditSegmentationResult:
        """Assign the customer to a K-Means segment or its rule-based equivalent."""
        return credit_kmeans.predict(payload)

    @router.get("/models/status", summary="Model runtime status")
    def models_status() -> dict:
        """Report which inference path every task is using."""
        return {
            "tasks": [
                churn_knn.describe(),
                churn_logreg.describe(),
                credit_kmeans.describe(),
            ],
            "segment_count": len(credit_kmeans.catalog),
        }

    return router

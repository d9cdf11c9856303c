"""HTTP route declarations for the FastAPI application."""

import logging
from typing import Optional, Union

from fastapi import APIRouter

from core.config import AppSettings
from ml.churn_inference import ChurnKnnService, ChurnLogRegService
from ml.credit_inference import CreditSegmentationService
from ml.interpreter import SegmentCatalog
from ml.model_loader import ModelRegistry, get_model_registry

from .prediction_routes import build_prediction_router


logger = logging.getLogger(__name__)


def build_router(settings: AppSettings, registry: Optional[ModelRegistry] = None) -> APIRouter:
    """Build application routes; prediction services are created once here."""
    router = APIRouter()
    model_registry = registry if registry is not None else get_model_registry()
    background_load = settings.background_model_load

    catalog = SegmentCatalog(path=settings.segment_catalog_path)
    churn_knn = ChurnKnnService(
        model_path=settings.churn_knn_model_path,
        use_fallback=settings.use_fallback,
        registry=model_registry,
        background_load=background_load,
    )
    churn_logreg = ChurnLogRegService(
        model_path=settings.churn_logreg_model_path,
        use_fallback=settings.use_fallback,
        registry=model_registry,
        background_load=background_load,
    )
    credit_kmeans = CreditSegmentationService(
        model_path=settings.credit_kmeans_model_path,
        catalog=catalog,
        use_fallback=settings.use_fallback,
        registry=model_registry,
        background_load=background_load,
    )
    logger.info(
        "Prediction services created use_fallback=%s background_load=%s",
        settings.use_fallback,
        background_load,
    )

    router.include_router(build_prediction_router(churn_knn, churn_logreg, credit_kmeans))

    @router.get("/", summary="Root endpoint")
    def read_root() -> dict[str, str]:
        """Return a basic message confirming service availability."""
        return {"status": "ok", "message": "{0} is running".format(settings.app_name)}

    @router.get("/health", summary="Health check")
    def health_check() -> dict[str, str]:
        """Return service health status for probes and monitors."""
        return {"status": "ok"}

    @router.get("/settings", summary="Settings snapshot")
    def get_settings_snapshot() -> dict[str, Union[str, bool, int]]:
        """Expose non-sensitive settings useful for local verification."""
        return {
            "app_name": settings.app_name,
            "debug": settings.debug,
            "port": settings.port,
            "use_fallback": settings.use_fallback,
        }

    return router

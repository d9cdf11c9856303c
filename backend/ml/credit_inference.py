"""Credit-card customer segmentation backed by a K-Means artifact."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from models.enums import FallbackPolicy, PredictionSource, PredictionTask

from .fallback import assign_credit_cluster
from .interpreter import SegmentCatalog, to_cluster_id
from .model_loader import ModelHandle, ModelRegistry
from .orchestrator import PredictionOrchestrator
from .preprocessing import CREDIT_FEATURE_NAMES, encode_credit_features, features_to_dict
from .schema import CreditSegmentationRequest, CreditSegmentationResult
from .session import RawInferenceOutput


logger = logging.getLogger(__name__)


class CreditSegmentationService(PredictionOrchestrator[CreditSegmentationRequest, CreditSegmentationResult]):
    """Assign credit-card customers to behavioural segments."""

    task = PredictionTask.CREDIT_KMEANS
    fallback_policy = FallbackPolicy.CONFIGURED

    def __init__(
        self,
        model_path: str,
        catalog: SegmentCatalog,
        use_fallback: bool = True,
        registry: Optional[ModelRegistry] = None,
        background_load: bool = False,
    ) -> None:
        self._catalog = catalog
        super().__init__(
            model_path=model_path,
            use_fallback=use_fallback,
            registry=registry,
            background_load=background_load,
        )

    @property
    def catalog(self) -> SegmentCatalog:
        """Return the injected segment catalog."""
        return self._catalog

    def encode(self, request: CreditSegmentationRequest) -> np.ndarray:
        return encode_credit_features(request)

    def interpret(
        self,
        raw: RawInferenceOutput,
        request: CreditSegmentationRequest,
        vector: np.ndarray,
        handle: ModelHandle,
    ) -> CreditSegmentationResult:
        cluster = to_cluster_id(raw.label)
        return CreditSegmentationResult(
            cluster=cluster,
            segment=self._catalog.describe(cluster),
            source=PredictionSource.MODEL,
            normalized_features=features_to_dict(CREDIT_FEATURE_NAMES, vector),
        )

    def _predict_with_fallback(self, request: CreditSegmentationRequest) -> CreditSegmentationResult:
        cluster = assign_credit_cluster(request)
        logger.debug("Fallback credit segment cluster=%d", cluster)
        return CreditSegmentationResult(
            cluster=cluster,
            segment=self._catalog.describe(cluster),
            source=PredictionSource.FALLBACK,
        )

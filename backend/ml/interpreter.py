"""Mapping from raw model output to stable, explainable responses."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
import json
import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from models.enums import PredictionSource, RiskLevel

from .fallback import churn_message
from .schema import ChurnPredictionResult, SegmentDescriptor
from .session import RawInferenceOutput


logger = logging.getLogger(__name__)

_DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[1] / "settings" / "segments.json"


def round_probability(value: float) -> float:
    """Round to two decimals, halves away from zero."""
    return float(Decimal(str(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def to_cluster_id(raw_label: Any) -> int:
    """Convert a raw cluster label (int or float) into an integer id."""
    if isinstance(raw_label, int) and not isinstance(raw_label, bool):
        return int(raw_label)
    value = float(raw_label)
    if not math.isfinite(value):
        raise ValueError("Cluster label is not finite: {0}".format(raw_label))
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def generic_segment(cluster: int) -> SegmentDescriptor:
    """Descriptor returned for cluster ids missing from the catalog."""
    return SegmentDescriptor(
        cluster=cluster,
        name="Segmento {0}".format(cluster),
        description="Cliente asignado al cluster {0}.".format(cluster),
        risk=RiskLevel.MEDIUM,
        customer_type="estandar",
        recommendation="Monitoreo regular y ofertas personalizadas.",
    )


class SegmentCatalog:
    """Immutable cluster-id to segment descriptor table, loaded once from JSON."""

    def __init__(self, path: Optional[str] = None, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        """Load the catalog from `rows` when given, otherwise from the JSON file at `path`."""
        self._path: Optional[Path] = None
        if rows is not None:
            segments = self._parse_rows(rows)
        else:
            self._path = Path(path).resolve() if path else _DEFAULT_CATALOG_PATH
            segments = self._load(self._path)
        self._segments: Mapping[int, SegmentDescriptor] = MappingProxyType(segments)

    @property
    def path(self) -> Optional[str]:
        """Return the catalog JSON path, if loaded from disk."""
        return str(self._path) if self._path else None

    @staticmethod
    def _parse_rows(rows: Any) -> Dict[int, SegmentDescriptor]:
        if not isinstance(rows, list):
            raise ValueError("Segment catalog must contain a JSON array.")
        segments: Dict[int, SegmentDescriptor] = {}
        for row in rows:
            try:
                segment = SegmentDescriptor.model_validate(row)
            except ValidationError:
                logger.exception("Invalid segment row skipped row=%s", row)
                continue
            if segment.cluster in segments:
                logger.warning("Duplicate segment cluster skipped cluster=%s", segment.cluster)
                continue
            segments[segment.cluster] = segment
        return segments

    @classmethod
    def _load(cls, path: Path) -> Dict[int, SegmentDescriptor]:
        if not path.exists():
            logger.warning("Segment catalog not found at path=%s; every cluster maps to the generic segment.", path)
            return {}
        try:
            rows = json.loads(path.read_text(encoding="utf-8"))
            segments = cls._parse_rows(rows)
            logger.info("Loaded segment catalog count=%d path=%s", len(segments), path)
            return segments
        except Exception:
            logger.exception("Failed loading segment catalog path=%s", path)
            return {}

    def __len__(self) -> int:
        return len(self._segments)

    def __contains__(self, cluster: object) -> bool:
        return cluster in self._segments

    def describe(self, cluster: int) -> SegmentDescriptor:
        """Return the descriptor for `cluster`; unknown ids get the generic segment."""
        segment = self._segments.get(cluster)
        if segment is None:
            return generic_segment(cluster)
        return segment.model_copy()


def interpret_churn_output(
    model_name: str,
    raw: RawInferenceOutput,
    source: PredictionSource = PredictionSource.MODEL,
) -> ChurnPredictionResult:
    """Turn a raw churn label and probability pair into a response."""
    prediction = 1 if int(float(raw.label)) == 1 else 0
    if raw.probabilities and len(raw.probabilities) >= 2:
        no_churn_probability, churn_probability = raw.probabilities[0], raw.probabilities[1]
        class_probability = churn_probability if prediction == 1 else no_churn_probability
    else:
        class_probability = 1.0
    if not math.isfinite(class_probability):
        raise ValueError("Model returned a non-finite probability: {0}".format(class_probability))
    class_probability = min(1.0, max(0.0, float(class_probability)))
    return ChurnPredictionResult(
        model=model_name,
        prediction=prediction,
        probability=round_probability(class_probability),
        message=churn_message(prediction, class_probability),
        source=source,
    )

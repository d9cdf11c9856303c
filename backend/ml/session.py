"""Inference session adapter over a loaded model handle."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from models.exceptions import InferenceError, ShapeMismatch

from .model_loader import ModelHandle
from .preprocessing import sanitize_vector


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawInferenceOutput:
    """Raw outputs of one scoring call."""

    label: Any
    probabilities: Optional[Tuple[float, ...]] = None


class InferenceSession:
    """Scores single feature vectors against a model handle."""

    def __init__(self, handle: ModelHandle) -> None:
        self._handle = handle

    @property
    def handle(self) -> ModelHandle:
        """Return the wrapped model handle."""
        return self._handle

    @property
    def input_shape(self) -> Tuple[int, Optional[int]]:
        """Declared input shape as (batch, features)."""
        return (1, self._handle.input_width)

    def _to_model_input(self, vector: Sequence[float]) -> Any:
        batch = sanitize_vector(vector).reshape(1, -1)
        expected = self._handle.input_width
        if expected is not None and batch.shape[1] != expected:
            raise ShapeMismatch(
                "Expected input shape (1, {0}) but received (1, {1}) for model path={2}".format(
                    expected, batch.shape[1], self._handle.path
                )
            )
        if self._handle.feature_columns:
            return pd.DataFrame(batch, columns=self._handle.feature_columns)
        return batch

    def run(self, vector: Sequence[float]) -> RawInferenceOutput:
        """Score one feature vector.

        Raises:
            ShapeMismatch: If the vector length differs from the declared input width.
            InferenceError: If the model raises while scoring.
        """
        model_input = self._to_model_input(vector)
        model = self._handle.model
        try:
            label = np.asarray(model.predict(model_input)).ravel()[0]
            probabilities: Optional[Tuple[float, ...]] = None
            if callable(getattr(model, "predict_proba", None)):
                row = np.asarray(model.predict_proba(model_input))[0]
                probabilities = tuple(float(value) for value in row)
        except Exception as exc:
            logger.exception("Model inference failed path=%s", self._handle.path)
            raise InferenceError("Inference failed for model path={0}: {1}".format(self._handle.path, exc)) from exc
        return RawInferenceOutput(label=label.item() if hasattr(label, "item") else label, probabilities=probabilities)

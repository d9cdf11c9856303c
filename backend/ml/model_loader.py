"""Process-wide registry of loaded model artifacts.

Handles are keyed by absolute artifact path, populated at most once per path
and never evicted: a handle lives until the process exits. Concurrent loads of
the same path are harmless, the first handle stored wins and every caller
gets that one back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

import joblib

from models.exceptions import ArtifactLoadError, ArtifactNotFound


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelHandle:
    """A loaded artifact: the estimator plus the metadata saved next to it."""

    path: str
    model: Any
    feature_columns: Optional[List[str]] = None
    model_name: str = "unknown"
    version: str = "v1"
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def input_width(self) -> Optional[int]:
        """Number of features the artifact accepts, when it declares one."""
        if self.feature_columns:
            return len(self.feature_columns)
        declared = self.metadata.get("n_features", getattr(self.model, "n_features_in_", None))
        return int(declared) if declared is not None else None


def _normalize_path(path: str) -> str:
    return str(Path(path).expanduser().resolve())


def _build_handle(path: str, artifact: Any) -> ModelHandle:
    """Accept either a bare estimator or a `{"model": ..., ...}` artifact dict."""
    if isinstance(artifact, dict):
        model = artifact.get("model", artifact.get("pipeline"))
        feature_columns = artifact.get("feature_columns")
        metadata = {key: value for key, value in artifact.items() if key not in {"model", "pipeline"}}
        model_name = str(artifact.get("model_name", type(model).__name__))
        version = str(artifact.get("version", "v1"))
    else:
        model = artifact
        feature_columns = None
        metadata = {}
        model_name = type(model).__name__
        version = "v1"

    if model is None or not callable(getattr(model, "predict", None)):
        raise ArtifactLoadError("Artifact at {0} does not contain a model with a predict method.".format(path))

    return ModelHandle(
        path=path,
        model=model,
        feature_columns=list(feature_columns) if feature_columns else None,
        model_name=model_name,
        version=version,
        metadata=metadata,
    )


class ModelRegistry:
    """Keyed cache of model handles with idempotent population."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._handles: Dict[str, ModelHandle] = {}

    def exists(self, path: str) -> bool:
        """Return whether `path` points at a readable file."""
        try:
            normalized = _normalize_path(path)
            return os.path.isfile(normalized) and os.access(normalized, os.R_OK)
        except (OSError, ValueError):
            return False

    def is_cached(self, path: str) -> bool:
        """Return whether a handle for `path` is already registered."""
        with self._lock:
            return _normalize_path(path) in self._handles

    def load(self, path: str) -> ModelHandle:
        """Return the handle for `path`, loading the artifact on first use.

        Raises:
            ArtifactNotFound: If the path is not a readable file.
            ArtifactLoadError: If the file cannot be deserialized into a model.
        """
        normalized = _normalize_path(path)
        with self._lock:
            cached = self._handles.get(normalized)
        if cached is not None:
            return cached

        if not self.exists(normalized):
            raise ArtifactNotFound("Model artifact not found at {0}".format(normalized))

        try:
            artifact = joblib.load(normalized)
        except Exception as exc:
            raise ArtifactLoadError("Model artifact at {0} could not be loaded: {1}".format(normalized, exc)) from exc

        handle = _build_handle(normalized, artifact)
        with self._lock:
            stored = self._handles.setdefault(normalized, handle)
        if stored is handle:
            logger.info("Model artifact loaded path=%s model_name=%s", normalized, handle.model_name)
        return stored

    def clear(self) -> None:
        """Forget every registered handle."""
        with self._lock:
            self._handles.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._handles)


_DEFAULT_REGISTRY_LOCK = RLock()
_DEFAULT_REGISTRY: Optional[ModelRegistry] = None


def get_model_registry() -> ModelRegistry:
    """Return the process-wide registry, creating it on first call."""
    global _DEFAULT_REGISTRY
    with _DEFAULT_REGISTRY_LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = ModelRegistry()
        return _DEFAULT_REGISTRY

"""Model-or-fallback prediction orchestration shared by every task.

Each task orchestrator owns one explicit state tag:

``PENDING``
    The artifact load has not finished yet; requests are answered by the
    fallback path when it is permitted and otherwise wait for the load.
``MODEL_BACKED``
    The artifact loaded; requests run encode -> inference -> interpret and
    recover per request through the fallback path when that fails.
``FALLBACK_ONLY``
    The artifact is missing or unusable. Decided once, never retried.

Whether the fallback path may be used is a per-task policy: ``ALWAYS`` tasks
fall back unconditionally, ``CONFIGURED`` tasks follow the service-wide
``use_fallback`` setting and raise ``InferenceUnavailable`` otherwise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from threading import Event, Lock, Thread
from typing import Any, Dict, Generic, Optional, TypeVar

import numpy as np

from models.enums import FallbackPolicy, InferencePath, PredictionTask
from models.exceptions import ArtifactLoadError, ArtifactNotFound, InferenceUnavailable

from .model_loader import ModelHandle, ModelRegistry, get_model_registry
from .session import InferenceSession, RawInferenceOutput


logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


class PredictionOrchestrator(ABC, Generic[RequestT, ResultT]):
    """Base class choosing between model-backed and rule-based inference."""

    task: PredictionTask
    fallback_policy: FallbackPolicy = FallbackPolicy.CONFIGURED

    def __init__(
        self,
        model_path: str,
        use_fallback: bool = True,
        registry: Optional[ModelRegistry] = None,
        background_load: bool = False,
    ) -> None:
        self._model_path = model_path
        self._use_fallback = bool(use_fallback)
        self._registry = registry if registry is not None else get_model_registry()
        self._state = InferencePath.PENDING
        self._session: Optional[InferenceSession] = None
        self._state_lock = Lock()
        self._loaded = Event()
        self._load_error: Optional[str] = None

        if background_load:
            Thread(
                target=self._load_model,
                name="model-loader-{0}".format(self.task.value),
                daemon=True,
            ).start()
        else:
            self._load_model()

    @property
    def model_path(self) -> str:
        """Return the configured model artifact path."""
        return self._model_path

    @property
    def state(self) -> InferencePath:
        """Return the current inference path tag."""
        return self._state

    @property
    def is_loaded(self) -> bool:
        """Whether requests are served by the model artifact."""
        return self._state is InferencePath.MODEL_BACKED

    @property
    def fallback_enabled(self) -> bool:
        """Whether this task may answer through the rule-based path."""
        return self.fallback_policy is FallbackPolicy.ALWAYS or self._use_fallback

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the initial load attempt has resolved."""
        return self._loaded.wait(timeout)

    def _load_model(self) -> None:
        """Resolve the artifact once; any failure pins the task to fallback."""
        try:
            handle = self._registry.load(self._model_path)
            session = InferenceSession(handle)
            with self._state_lock:
                self._session = session
                self._state = InferencePath.MODEL_BACKED
            logger.info("Task %s uses model artifact path=%s", self.task.value, self._model_path)
        except ArtifactNotFound:
            self._mark_fallback_only("artifact not found")
            logger.warning(
                "Model artifact for task %s not found path=%s. Using rule-based fallback.",
                self.task.value,
                self._model_path,
            )
        except ArtifactLoadError as exc:
            self._mark_fallback_only(str(exc))
            logger.error(
                "Model artifact for task %s failed to load path=%s error=%s. Using rule-based fallback.",
                self.task.value,
                self._model_path,
                exc,
            )
        except Exception as exc:
            self._mark_fallback_only(str(exc))
            logger.exception("Unexpected error loading model for task %s path=%s", self.task.value, self._model_path)
        finally:
            self._loaded.set()

    def _mark_fallback_only(self, reason: str) -> None:
        with self._state_lock:
            self._session = None
            self._state = InferencePath.FALLBACK_ONLY
            self._load_error = reason

    def predict(self, request: RequestT) -> ResultT:
        """Predict with the model when available, otherwise per fallback policy.

        Raises:
            InferenceUnavailable: If the model path is unusable and fallback is not permitted.
        """
        if self._state is InferencePath.PENDING and not self.fallback_enabled:
            # Without a fallback the request waits on the in-flight load.
            self._loaded.wait()
        session = self._session
        if self._state is InferencePath.MODEL_BACKED and session is not None:
            try:
                return self._predict_with_model(session, request)
            except Exception as exc:
                if not self.fallback_enabled:
                    logger.exception("Model prediction failed for task %s and fallback is disabled.", self.task.value)
                    raise InferenceUnavailable(
                        self.task.value,
                        "Model prediction failed for task '{0}' and fallback is disabled.".format(self.task.value),
                    ) from exc
                logger.exception("Model prediction failed for task %s. Using rule-based fallback.", self.task.value)
                return self._predict_with_fallback(request)

        if self.fallback_enabled:
            return self._predict_with_fallback(request)
        raise InferenceUnavailable(self.task.value)

    def _predict_with_model(self, session: InferenceSession, request: RequestT) -> ResultT:
        """Run encode -> inference -> interpret for one request."""
        vector = self.encode(request)
        raw = session.run(vector)
        return self.interpret(raw, request, vector, session.handle)

    @abstractmethod
    def encode(self, request: RequestT) -> np.ndarray:
        """Encode the request into the artifact's feature vector."""

    @abstractmethod
    def interpret(
        self,
        raw: RawInferenceOutput,
        request: RequestT,
        vector: np.ndarray,
        handle: ModelHandle,
    ) -> ResultT:
        """Map raw model output into the task response."""

    @abstractmethod
    def _predict_with_fallback(self, request: RequestT) -> ResultT:
        """Answer with the rule-based heuristic for this task."""

    def describe(self) -> Dict[str, Any]:
        """Status snapshot for health and diagnostics endpoints."""
        return {
            "task": self.task.value,
            "state": self._state.value,
            "model_loaded": self.is_loaded,
            "model_path": self._model_path,
            "fallback_policy": self.fallback_policy.value,
            "fallback_enabled": self.fallback_enabled,
            "load_error": self._load_error,
        }

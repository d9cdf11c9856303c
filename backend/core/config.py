"""Configuration loading utilities for YAML-based application settings."""

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from .logging_config import get_logger


logger = get_logger(__name__)
_BASE_DIR = Path(__file__).resolve().parent.parent
_CONFIG_PATH = _BASE_DIR / "config.yml"


@dataclass(frozen=True)
class AppSettings:
    """Application settings loaded from `config.yml` and the environment."""

    app_name: str
    debug: bool
    host: str
    port: int
    cors_origins: list[str]
    churn_knn_model_path: str
    churn_logreg_model_path: str
    credit_kmeans_model_path: str
    segment_catalog_path: str
    use_fallback: bool
    background_model_load: bool


def _to_bool(value: Any, default: bool = False) -> bool:
    """Convert value to bool with a default fallback."""
    try:
        if isinstance(value, bool):
            return value
        return value.strip().lower() in {"1", "true", "yes", "on"}
    except (AttributeError, ValueError):
        logger.warning("Invalid boolean value '%s'. Using default=%s", value, default)
        return default


def _to_int(value: Any, default: int) -> int:
    """Convert value to int with a default fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid integer value '%s'. Using default=%s", value, default)
        return default


def _to_list(value: Any) -> list[str]:
    """Convert list-like or comma-separated value to list[str]."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return [item.strip() for item in str(value).split(",") if item.strip()]


def _env(key: str) -> Optional[str]:
    """Return a stripped environment value, or None when unset or blank."""
    value = os.getenv(key, "").strip()
    return value or None


def resolve_path(path: str) -> str:
    """Resolve a configured path; relative paths are anchored at the backend directory."""
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        candidate = _BASE_DIR / candidate
    return str(candidate.resolve())


def _read_config(config_path: Path) -> dict:
    """Read and parse YAML configuration."""
    try:
        with config_path.open("r", encoding="utf-8") as config_file:
            config_data = yaml.safe_load(config_file) or {}
        logger.info("Configuration loaded from %s", config_path)
        return config_data
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Falling back to defaults.", config_path)
        return {}
    except Exception:
        logger.exception("Failed to load config file from %s", config_path)
        return {}


def load_settings(config_path: Optional[str] = None) -> AppSettings:
    """Load settings from `config.yml`; environment variables take precedence.

    Args:
        config_path: Optional alternative YAML file.

    Returns:
        AppSettings: Immutable settings snapshot.
    """
    config = _read_config(Path(config_path) if config_path else _CONFIG_PATH)
    app_cfg = config.get("app", {}) or {}
    models_cfg = config.get("models", {}) or {}
    prediction_cfg = config.get("prediction", {}) or {}

    app_name = str(app_cfg.get("name", "Customer Prediction API"))
    debug = _to_bool(app_cfg.get("debug", False), False)
    host = str(_env("HOST") or app_cfg.get("host", "127.0.0.1"))
    port = _to_int(_env("PORT") or app_cfg.get("port", 3000), 3000)
    cors_origins = _to_list(_env("CORS_ORIGIN") or app_cfg.get("cors_origins", ["http://localhost:5173"]))

    churn_knn_model_path = _env("CHURN_KNN_MODEL_PATH") or str(
        models_cfg.get("churn_knn", "models/churn_knn.joblib")
    )
    churn_logreg_model_path = _env("CHURN_LOGREG_MODEL_PATH") or str(
        models_cfg.get("churn_logreg", "models/churn_logreg.joblib")
    )
    credit_kmeans_model_path = _env("CREDIT_KMEANS_MODEL_PATH") or str(
        models_cfg.get("credit_kmeans", "models/credit_kmeans.joblib")
    )
    segment_catalog_path = _env("SEGMENT_CATALOG_PATH") or str(
        models_cfg.get("segment_catalog", "settings/segments.json")
    )

    # Any value other than "false" keeps the rule-based fallback enabled.
    env_fallback = _env("USE_FALLBACK")
    if env_fallback is not None:
        use_fallback = env_fallback.lower() != "false"
    else:
        use_fallback = _to_bool(prediction_cfg.get("use_fallback", True), True)
    background_model_load = _to_bool(prediction_cfg.get("background_model_load", True), True)

    return AppSettings(
        app_name=app_name,
        debug=debug,
        host=host,
        port=port,
        cors_origins=cors_origins,
        churn_knn_model_path=resolve_path(churn_knn_model_path),
        churn_logreg_model_path=resolve_path(churn_logreg_model_path),
        credit_kmeans_model_path=resolve_path(credit_kmeans_model_path),
        segment_catalog_path=resolve_path(segment_catalog_path),
        use_fallback=use_fallback,
        background_model_load=background_model_load,
    )

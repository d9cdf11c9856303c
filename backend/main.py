"""Application entrypoint for the customer prediction FastAPI backend."""

import sys
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Ensure the backend packages are importable when run as a script
# ---------------------------------------------------------------------------
_BACKEND_DIR = Path(__file__).resolve().parent
if str(_BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(_BACKEND_DIR))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from api.errors import register_exception_handlers
from api.routes import build_router
from core import AppSettings, get_logger, load_settings, setup_logging
from ml.model_loader import ModelRegistry


setup_logging()
logger = get_logger(__name__)


def create_app(settings: Optional[AppSettings] = None, registry: Optional[ModelRegistry] = None) -> FastAPI:
    """Create and configure a FastAPI application instance."""
    settings = settings or load_settings()
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(build_router(settings, registry=registry))

    logger.info("Application initialized: %s", settings.app_name)
    return app


def run() -> None:
    """Start the ASGI server for local development."""
    settings = load_settings()
    try:
        uvicorn.run("main:create_app", factory=True, host=settings.host, port=settings.port, reload=settings.debug)
    except Exception:
        logger.exception("Failed to start uvicorn server.")
        raise


if __name__ == "__main__":
    run()

"""Exception handlers rendering every failure as an `{error, message}` body."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models.exceptions import InferenceUnavailable


logger = logging.getLogger(__name__)


def error_body(error: str, message: str) -> dict:
    """Build the standard error payload."""
    return {"error": error, "message": message}


def _validation_message(exc: RequestValidationError) -> str:
    """Describe the first validation error by field name."""
    errors = exc.errors()
    if not errors:
        return "Error de validacion en la peticion."
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part != "body"]
    field = ".".join(location) or "body"
    return "El campo '{0}' {1}".format(field, str(first.get("msg", "es invalido")).lower())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the service-wide exception handlers to `app`."""

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body("VALIDATION_ERROR", _validation_message(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = "La ruta {0} {1} no existe en este servidor.".format(request.method, request.url.path)
            return JSONResponse(status_code=exc.status_code, content=error_body("NOT_FOUND", message))
        return JSONResponse(status_code=exc.status_code, content=error_body("HTTP_ERROR", str(exc.detail)))

    @app.exception_handler(InferenceUnavailable)
    async def _handle_inference_unavailable(request: Request, exc: InferenceUnavailable) -> JSONResponse:
        logger.warning("Prediction unavailable task=%s path=%s", exc.task, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=error_body(exc.error_type, str(exc)),
        )

    @app.exception_handler(Exception)
    async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("INTERNAL_SERVER_ERROR", str(exc) or "Ha ocurrido un error interno en el servidor"),
        )

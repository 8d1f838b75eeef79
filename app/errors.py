"""
Manejadores de excepciones: traducen errores del dominio al envelope JSON.

- ``ServiceError`` -> su ``status_code`` con ``{success: false, error, errors?, details?}``
- ``RequestValidationError`` -> 400 con el mapa campo -> mensaje
- Cualquier otra excepción -> 500 con ``details``
"""

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import BadRequestError, CompensationFailedError, ServiceError
from models.schemas import ApiResponse

logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = "Value error, "
_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = [str(part) for part in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def validation_errors_to_map(errors: Sequence[Dict[str, Any]]) -> Dict[str, str]:
    """Convierte los errores de pydantic en ``{campo: mensaje}`` (el primero por campo)."""
    field_map: Dict[str, str] = {}
    for error in errors:
        field = _field_name(error.get("loc", ()))
        message = str(error.get("msg", "Invalid value"))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        field_map.setdefault(field, message)
    return field_map


def _validation_summary(errors: Sequence[Dict[str, Any]], field_map: Dict[str, str]) -> str:
    missing = [
        _field_name(error.get("loc", ()))
        for error in errors
        if error.get("type") == "missing"
    ]
    if missing and len(missing) == len(errors):
        return f"Missing required fields: {' and '.join(missing)}"
    return next(iter(field_map.values()), "Invalid request")


def service_error_response(exc: ServiceError) -> JSONResponse:
    body = ApiResponse(
        success=False,
        error=exc.message,
        errors=(exc.errors or None) if isinstance(exc, BadRequestError) else None,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content=body.to_body())


async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    # CompensationFailedError ya se registró en CRITICAL dentro de la saga
    if exc.status_code >= 500 and not isinstance(exc, CompensationFailedError):
        logger.error(
            f"❌ {request.method} {request.url.path} -> {exc.status_code}: {exc.message}",
            extra={"error_code": exc.code, "details": exc.details},
        )
    elif exc.status_code < 500:
        logger.info(
            f"↩️ {request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
        )
    return service_error_response(exc)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    field_map = validation_errors_to_map(errors)
    error = BadRequestError(_validation_summary(errors, field_map), errors=field_map)
    logger.info(f"⚠️ Validación fallida en {request.url.path}: {field_map}")
    return service_error_response(error)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
    body = ApiResponse(
        success=False,
        error="Internal server error",
        details=str(exc) or exc.__class__.__name__,
    )
    return JSONResponse(status_code=500, content=body.to_body())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

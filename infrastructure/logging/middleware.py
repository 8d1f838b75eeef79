"""
Middleware de FastAPI para correlation IDs.
"""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from infrastructure.logging.structured_logger import (
    bind_request,
    configure_logging,
    reset_request,
)

CORRELATION_ID_HEADER = "X-Correlation-ID"
RESPONSE_TIME_HEADER = "X-Response-Time-ms"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Reutiliza ``X-Correlation-ID`` o genera uno nuevo, lo deja disponible
    para el logging durante la request y lo devuelve en la respuesta.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
        tokens = bind_request(cid, request.method, request.url.path)
        start_time = time.monotonic()
        try:
            response = await call_next(request)
        finally:
            reset_request(tokens)

        response.headers[CORRELATION_ID_HEADER] = cid
        response.headers[RESPONSE_TIME_HEADER] = (
            f"{(time.monotonic() - start_time) * 1000:.2f}"
        )
        return response


def setup_logging_middleware(
    app: FastAPI, level: str = "INFO", service_name: str = "agrifusion-api"
) -> FastAPI:
    """Configura el logging estructurado y registra el middleware."""
    configure_logging(level=level, service_name=service_name)
    app.add_middleware(CorrelationIdMiddleware)
    return app

"""
Logging estructurado: JSON con correlation ID y saga/paso en curso.
"""

from .middleware import (
    CORRELATION_ID_HEADER,
    CorrelationIdMiddleware,
    setup_logging_middleware,
)
from .structured_logger import (
    HumanReadableFormatter,
    StructuredFormatter,
    bind_request,
    configure_logging,
    get_correlation_id,
    reset_request,
    saga_step,
)

__all__ = [
    "CORRELATION_ID_HEADER",
    "CorrelationIdMiddleware",
    "HumanReadableFormatter",
    "StructuredFormatter",
    "bind_request",
    "configure_logging",
    "get_correlation_id",
    "reset_request",
    "saga_step",
    "setup_logging_middleware",
]

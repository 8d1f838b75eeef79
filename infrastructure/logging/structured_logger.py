"""
Configuración de logging estructurado con JSON y correlation IDs.

Cada línea de log lleva, además del mensaje, el correlation ID de la
request y la saga/paso en curso. Los pasos de las sagas registran sus
fallos con contexto suficiente (tabla, ids) para poder reproducirlos a
mano; ese contexto llega como ``extra`` y se serializa tal cual.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_request: ContextVar[Optional[Dict[str, str]]] = ContextVar("request", default=None)
_saga_step: ContextVar[Optional[Dict[str, str]]] = ContextVar("saga_step", default=None)

# Atributos estándar de LogRecord que no se copian a "extra"
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "asctime", "taskName",
    }
)

RequestTokens = Tuple[Token, Token]


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()


def bind_request(correlation_id: str, method: str, path: str) -> RequestTokens:
    """Asocia la request en curso al contexto de logging."""
    return (
        _correlation_id.set(correlation_id),
        _request.set({"method": method, "path": path}),
    )


def reset_request(tokens: RequestTokens) -> None:
    cid_token, request_token = tokens
    _correlation_id.reset(cid_token)
    _request.reset(request_token)


@contextmanager
def saga_step(saga: str, step: str, phase: str = "execute") -> Iterator[None]:
    """
    Marca los logs emitidos dentro del bloque con la saga y el paso.

    Args:
        saga: Nombre de la saga (p. ej. ``farmer_assignment``)
        step: Nombre del comando
        phase: ``execute`` o ``undo``
    """
    token = _saga_step.set({"saga": saga, "step": step, "phase": phase})
    try:
        yield
    finally:
        _saga_step.reset(token)


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    cid = _correlation_id.get()
    if cid:
        fields["correlation_id"] = cid
    request = _request.get()
    if request:
        fields["request"] = request
    step = _saga_step.get()
    if step:
        fields["saga"] = step
    extra = {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS
    }
    if extra:
        fields["extra"] = extra
    return fields


class StructuredFormatter(logging.Formatter):
    """Una línea JSON por log; pensado para producción."""

    def __init__(self, service_name: str = "agrifusion-api"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "location": f"{record.filename}:{record.lineno}",
        }
        log_data.update(_record_fields(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Formatter para desarrollo (``LOG_FORMAT=text``)."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        color = self.COLORS.get(record.levelname, "")
        parts = [
            datetime.now(timezone.utc).strftime("%H:%M:%S"),
            f"{color}{record.levelname:8}{self.RESET}",
        ]
        if "correlation_id" in fields:
            parts.append(f"[{fields['correlation_id'][:8]}]")
        if "saga" in fields:
            step = fields["saga"]
            parts.append(f"<{step['saga']}.{step['step']}:{step['phase']}>")
        parts.append(f"{record.name}: {record.getMessage()}")

        line = " ".join(parts)
        if "extra" in fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields["extra"].items())
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    level: str = "INFO",
    json_output: Optional[bool] = None,
    service_name: str = "agrifusion-api",
) -> None:
    """
    Configura el logger raíz con un único handler a stdout.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR)
        json_output: None usa ``LOG_FORMAT`` de la configuración
        service_name: Nombre del servicio para los logs
    """
    if json_output is None:
        from app.config import settings

        json_output = settings.log_format.lower() == "json"

    formatter: logging.Formatter
    if json_output:
        formatter = StructuredFormatter(service_name=service_name)
    else:
        formatter = HumanReadableFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)
    root_logger.addHandler(handler)

    # Silenciar clientes HTTP usados por supabase-py
    for noisy in ("httpx", "httpcore", "hpack", "postgrest"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

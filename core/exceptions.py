"""Excepciones del dominio y su mapeo a códigos HTTP."""

from typing import Any, Dict, List, Optional


class ServiceError(Exception):
    """
    Base de todos los errores visibles para el llamador.

    Attributes:
        message: Mensaje legible para el envelope de respuesta.
        status_code: Código HTTP con el que se reporta.
        code: Identificador estable del tipo de error.
        details: Información adicional opcional (se expone como "details").
    """

    status_code = 500
    code = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class UnauthorizedError(ServiceError):
    """Credencial ausente o inválida."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(ServiceError):
    """El rol del perfil no coincide con el requerido."""

    status_code = 403
    code = "forbidden"


class NotFoundError(ServiceError):
    """La entidad referenciada no existe."""

    status_code = 404
    code = "not_found"


class BadRequestError(ServiceError):
    """Error de validación; ``errors`` contiene el mapa campo -> mensaje."""

    status_code = 400
    code = "bad_request"

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[Dict[str, str]] = None,
        code: Optional[str] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, code=code, details=details)
        self.errors = errors or {}


class ConflictError(ServiceError):
    """Carrera perdida o estado duplicado (p. ej. agricultor ya asignado)."""

    status_code = 409
    code = "conflict"


class InternalError(ServiceError):
    """Fallo del almacén u otro error interno."""

    status_code = 500
    code = "internal_error"


class RepositoryError(InternalError):
    """Error en operaciones del repositorio (escritura/lectura fallida)."""

    code = "repository_error"


class UnknownNotificationKindError(BadRequestError):
    """No hay plantilla registrada para el tipo de notificación."""

    code = "unknown_notification_kind"

    def __init__(self, kind: Any):
        super().__init__(f"Unknown notification type: {kind}")
        self.kind = kind


class SagaExecutionError(InternalError):
    """
    Exception raised when a saga fails at a critical step.

    Attributes:
        completed_commands: Names of the steps that completed before the failure.
        failed_at: Index of the step that failed (0-based).
    """

    code = "saga_failed"

    def __init__(
        self,
        message: str,
        completed_commands: Optional[List[str]] = None,
        failed_at: Optional[int] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, details=details)
        self.completed_commands = completed_commands or []
        self.failed_at = (
            failed_at if failed_at is not None else len(self.completed_commands)
        )


class RolledBackError(SagaExecutionError):
    """A critical step failed and every compensation completed."""

    code = "rolled_back"


class CompensationFailedError(SagaExecutionError):
    """
    A critical step failed and at least one compensation also failed.

    The stored data is now inconsistent and needs manual repair.
    """

    code = "compensation_failed"

    def __init__(
        self,
        message: str,
        completed_commands: Optional[List[str]] = None,
        failed_at: Optional[int] = None,
        failed_compensations: Optional[List[str]] = None,
        details: Optional[str] = None,
    ):
        super().__init__(message, completed_commands, failed_at, details=details)
        self.failed_compensations = failed_compensations or []

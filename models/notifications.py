"""
Modelos de notificaciones: tipos, plantillas y filas persistidas.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class NotificationKind(str, Enum):
    """Tipos de notificación soportados (conjunto cerrado)."""

    # Autenticación y seguridad
    EMAIL_VERIFIED = "email_verified"
    PASSWORD_RESET = "password_reset"
    SECURITY_ALERT = "security_alert"

    # Perfil y ajustes
    PROFILE_UPDATE = "profile_update"
    AVATAR_UPDATED = "avatar_updated"
    SETTINGS_UPDATED = "settings_updated"

    # Relación agricultor-consultor
    CONSULTANT_ASSIGNED = "consultant_assigned"
    CONSULTANT_REMOVED = "consultant_removed"
    FARMER_LINKED = "farmer_linked"
    FARMER_CREATED = "farmer_created"
    FARMER_REMOVED = "farmer_removed"

    # Estado de la cuenta
    ACCOUNT_ACTIVATED = "account_activated"
    ACCOUNT_SUSPENDED = "account_suspended"
    APPROVAL_PENDING = "approval_pending"
    APPROVAL_SUCCESS = "approval_success"
    APPROVAL_REJECTED = "approval_rejected"

    # Gestión de finca
    FARM_SETUP = "farm_setup"
    FARM_UPDATE = "farm_update"

    # Administración
    CONSULTANT_PENDING_REVIEW = "consultant_pending_review"
    FARMER_STATUS_CHANGE = "farmer_status_change"

    # General
    WELCOME = "welcome"
    SYSTEM = "system"


class NotificationCategory(str, Enum):
    AUTHENTICATION = "authentication"
    PROFILE = "profile"
    RELATIONSHIP = "relationship"
    STATUS = "status"
    SECURITY = "security"
    SYSTEM = "system"
    FARM = "farm"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


NotificationContext = Mapping[str, Any]


@dataclass(frozen=True)
class NotificationTemplate:
    """
    Conjunto de generadores puros para un tipo de notificación.

    ``generate_title`` y ``generate_message`` son obligatorios;
    ``generate_action_url`` y ``generate_metadata`` son opcionales y pueden
    devolver None. Los campos obligatorios del contexto se leen con
    ``ctx["campo"]`` y los opcionales con ``ctx.get("campo")``.
    """

    kind: NotificationKind
    category: NotificationCategory
    priority: NotificationPriority
    generate_title: Callable[[NotificationContext], str]
    generate_message: Callable[[NotificationContext], str]
    generate_action_url: Optional[Callable[[NotificationContext], Optional[str]]] = None
    generate_metadata: Optional[
        Callable[[NotificationContext], Optional[Dict[str, Any]]]
    ] = None


class NotificationRow(BaseModel):
    """Fila de la tabla ``notifications`` lista para insertar."""

    model_config = ConfigDict(use_enum_values=True)

    recipient_id: str
    type: NotificationKind
    title: str
    message: str
    category: Optional[NotificationCategory] = None
    priority: Optional[NotificationPriority] = NotificationPriority.NORMAL
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

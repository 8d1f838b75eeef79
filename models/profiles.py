"""
Modelos de Pydantic para perfiles, agricultores y consultores.

Reflejan las filas de las tablas ``profiles``, ``farmers``, ``consultants``
y ``approval_requests``. Se construyen desde los dicts que devuelve el
almacén con ``Model.model_validate(row)``; los campos que no se usan en
las sagas se ignoran.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Conjunto cerrado de roles de la plataforma."""

    FARMER = "farmer"
    CONSULTANT = "consultant"
    EXPERT = "expert"
    BUYER = "buyer"
    ADMIN = "admin"


class ProfileStatus(str, Enum):
    """Estado del ciclo de vida de un perfil."""

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Profile(BaseModel):
    """
    Perfil anclado a una identidad del servicio de autenticación.

    Campos:
        id: Identificador del perfil
        auth_user_id: Identidad del servicio de autenticación
        role: Rol declarado
        status: Estado del ciclo de vida
        is_verified: Bandera de verificación
    """

    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    id: str
    auth_user_id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Role
    status: ProfileStatus = ProfileStatus.PENDING
    is_verified: bool = False


class FarmerRecord(BaseModel):
    """
    Registro de agricultor (uno a uno con un perfil de rol ``farmer``).

    ``consultant_id`` guarda el *profile id* del consultor; None significa
    que el agricultor no está asignado.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    profile_id: str
    consultant_id: Optional[str] = None
    farm_name: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    land_size_acres: Optional[float] = None
    current_crops: List[str] = Field(default_factory=list)

    @property
    def is_assigned(self) -> bool:
        return self.consultant_id is not None


class ConsultantRecord(BaseModel):
    """Registro profesional de un consultor (uno a uno con su perfil)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    profile_id: str
    qualification: Optional[str] = None
    specialization_areas: List[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, ge=0)
    country: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    service_country: Optional[str] = None
    service_state: Optional[str] = None
    service_district: Optional[str] = None
    certificate_urls: List[str] = Field(default_factory=list)
    assigned_farmers_count: int = 0


class SubmittedDocuments(BaseModel):
    """Metadata categorizada de documentos de una solicitud de revisión."""

    educational: Optional[str] = None
    professional: Optional[str] = None
    experience: Optional[str] = None
    government: Optional[str] = None
    submitted_at: datetime


class ReviewRequest(BaseModel):
    """Solicitud de revisión (append-only) ligada a un perfil."""

    model_config = ConfigDict(extra="ignore")

    profile_id: str
    request_type: str = "registration"
    status: ApprovalStatus = ApprovalStatus.PENDING
    submitted_documents: SubmittedDocuments

    def to_row(self) -> dict:
        """Fila lista para insertar; omite las categorías sin documento."""
        return {
            "profile_id": self.profile_id,
            "request_type": self.request_type,
            "status": self.status.value,
            "submitted_documents": self.submitted_documents.model_dump(
                mode="json", exclude_none=True
            ),
        }

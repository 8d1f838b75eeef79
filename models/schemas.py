# Modelos Pydantic de la API (requests, envelope y health)
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.config import settings

LOCATION_FIELDS = (
    "country",
    "state",
    "district",
    "service_country",
    "service_state",
    "service_district",
)


# ============================================================================
# Envelope de respuesta
# ============================================================================

class ApiResponse(BaseModel):
    """Envelope común: ``{success, data?|error, errors?}``."""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
    errors: Optional[Dict[str, str]] = None
    details: Optional[str] = None

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str
    supabase: str = "disconnected"


# ============================================================================
# Vinculación agricultor -> consultor
# ============================================================================

class LinkFarmerRequest(BaseModel):
    """Body de ``POST /api/farmers/link``."""

    model_config = ConfigDict(populate_by_name=True)

    farmer_id: str = Field(..., alias="farmerId", min_length=1)
    farmer_profile_id: str = Field(..., alias="farmerProfileId", min_length=1)


class LinkFarmerResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    farmer_id: str = Field(..., alias="farmerId")
    consultant_id: str = Field(..., alias="consultantId")


# ============================================================================
# Registro de consultor
# ============================================================================

class ConsultantRegistrationRequest(BaseModel):
    """
    Body de ``POST /api/consultant/register``.

    Todas las cadenas se recortan y una cadena vacía se trata como ausente.
    La validación completa ocurre antes de cualquier escritura.
    """

    avatar_url: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    service_country: Optional[str] = None
    service_state: Optional[str] = None
    service_district: Optional[str] = None
    document_urls: Optional[List[str]] = None

    @field_validator("avatar_url", *LOCATION_FIELDS, mode="before")
    @classmethod
    def strip_blank(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator(*LOCATION_FIELDS)
    @classmethod
    def validate_location_length(
        cls, v: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        max_length = settings.max_location_length
        if v is not None and len(v) > max_length:
            raise ValueError(
                f"{info.field_name} exceeds maximum length of {max_length} characters"
            )
        return v

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        parsed = urlparse(v)
        if not parsed.scheme or not (parsed.netloc or parsed.path):
            raise ValueError("Invalid avatar URL format")
        return v

    @field_validator("document_urls", mode="before")
    @classmethod
    def validate_document_urls(cls, v: Any) -> Any:
        if v is None:
            return v
        if not isinstance(v, list):
            raise ValueError("document_urls must be an array")
        cleaned = []
        for item in v:
            if isinstance(item, str):
                item = item.strip()
                if not item:
                    continue
            cleaned.append(item)
        return cleaned

    def consultant_updates(self) -> Dict[str, Any]:
        """Campos que se escriben sobre el registro del consultor."""
        updates: Dict[str, Any] = {
            field: getattr(self, field) for field in LOCATION_FIELDS
        }
        updates["certificate_urls"] = list(self.document_urls or [])
        return updates


# ============================================================================
# Listado de agricultores sin asignar
# ============================================================================

class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")

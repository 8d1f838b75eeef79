"""
Endpoints de consultores.
"""
import logging

from fastapi import APIRouter, Depends

from app.dependencies import get_registration_identity, get_registration_service
from models.schemas import ApiResponse, ConsultantRegistrationRequest
from services.identity_service import ResolvedIdentity
from services.registration_saga import ConsultantRegistrationService

router = APIRouter(prefix="/api/consultant", tags=["consultant"])
logger = logging.getLogger(__name__)


@router.post("/register")
async def complete_registration(
    payload: ConsultantRegistrationRequest,
    identity: ResolvedIdentity = Depends(get_registration_identity),
    service: ConsultantRegistrationService = Depends(get_registration_service),
) -> dict:
    """
    Completa el registro del consultor: avatar, ubicación, documentos,
    solicitud de revisión y notificación de bienvenida.

    Acepta ``Authorization: Bearer`` o, durante la ventana de
    pre-verificación de email, ``x-user-id``.
    """
    result = await service.complete_registration(identity.profile, payload)
    return ApiResponse(success=result["success"], message=result["message"]).to_body()

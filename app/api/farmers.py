"""
Endpoints de agricultores para consultores.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import (
    get_assignment_service,
    get_authenticated_identity,
    get_identity_resolver,
    get_unassigned_farmer_service,
)
from models.profiles import Role
from models.schemas import ApiResponse, LinkFarmerRequest
from services.assignment_saga import FarmerAssignmentService
from services.farmer_listing import DEFAULT_PAGE_SIZE, UnassignedFarmerService
from services.identity_service import IdentityResolver, ResolvedIdentity, require_role

router = APIRouter(prefix="/api/farmers", tags=["farmers"])
logger = logging.getLogger(__name__)


@router.post("/link")
async def link_farmer(
    payload: LinkFarmerRequest,
    identity: ResolvedIdentity = Depends(get_authenticated_identity),
    resolver: IdentityResolver = Depends(get_identity_resolver),
    service: FarmerAssignmentService = Depends(get_assignment_service),
) -> dict:
    """
    Vincula un agricultor sin asignar al consultor autenticado.

    Body: ``{"farmerId": ..., "farmerProfileId": ...}``
    """
    require_role(identity.profile, Role.CONSULTANT, "Only consultants can link farmers")
    consultant = await resolver.get_consultant_record(identity.profile.id)

    result = await service.link_farmer(
        identity.profile, consultant, payload.farmer_id, payload.farmer_profile_id
    )
    return ApiResponse(
        success=True,
        message="Farmer linked successfully",
        data=result.model_dump(by_alias=True),
    ).to_body()


@router.get("/unassigned")
async def list_unassigned_farmers(
    page: int = Query(1, description="Número de página (>= 1)"),
    limit: int = Query(DEFAULT_PAGE_SIZE, description="Elementos por página (1-50)"),
    search: Optional[str] = Query(None, description="Nombre, email, teléfono, distrito o estado"),
    district: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    crops: Optional[str] = Query(None, description="Cultivos separados por coma"),
    identity: ResolvedIdentity = Depends(get_authenticated_identity),
    service: UnassignedFarmerService = Depends(get_unassigned_farmer_service),
) -> dict:
    """Lista agricultores sin consultor asignado."""
    require_role(
        identity.profile, Role.CONSULTANT, "Only consultants can access this endpoint"
    )
    return await service.list_unassigned(
        page=page,
        limit=limit,
        search=search,
        district=district,
        state=state,
        crops=crops,
    )

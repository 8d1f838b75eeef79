"""Inyección de dependencias para FastAPI."""
from typing import Optional

from fastapi import Depends, Header
from supabase import Client

from core.exceptions import InternalError
from infrastructure.database import get_supabase_admin_client, get_supabase_public_client
from repositories.interfaces import IDataStore
from services.assignment_saga import FarmerAssignmentService
from services.farmer_listing import UnassignedFarmerService
from services.identity_service import IdentityResolver, ResolvedIdentity
from services.notification_service import NotificationService
from services.registration_saga import ConsultantRegistrationService
from services.repair_tasks import RepairTaskRecorder


def get_supabase() -> Optional[Client]:
    """Cliente de Supabase con service role (singleton)."""
    return get_supabase_admin_client()


def get_supabase_public() -> Optional[Client]:
    """Cliente de Supabase con anon key (singleton)."""
    return get_supabase_public_client()


def get_data_store(supabase: Optional[Client] = Depends(get_supabase)) -> IDataStore:
    """
    Factory para el almacén de datos.

    Permite cambiar la implementación fácilmente (DIP).
    """
    if supabase is None:
        raise InternalError(
            "Database not configured",
            details="SUPABASE_URL or SUPABASE_SERVICE_KEY not configured",
        )
    from repositories.supabase_store import SupabaseDataStore
    return SupabaseDataStore(supabase)


def get_notification_service(
    store: IDataStore = Depends(get_data_store),
) -> NotificationService:
    return NotificationService(store)


def get_repair_recorder(store: IDataStore = Depends(get_data_store)) -> RepairTaskRecorder:
    return RepairTaskRecorder(store)


def get_identity_resolver(
    store: IDataStore = Depends(get_data_store),
    auth_client: Optional[Client] = Depends(get_supabase_public),
) -> IdentityResolver:
    return IdentityResolver(auth_client, store)


async def get_authenticated_identity(
    authorization: Optional[str] = Header(None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> ResolvedIdentity:
    """Resuelve el llamador solo desde ``Authorization: Bearer``."""
    return await resolver.resolve(authorization)


async def get_registration_identity(
    authorization: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> ResolvedIdentity:
    """
    Resuelve el llamador desde ``Authorization`` o ``x-user-id``.

    Solo el registro de consultores acepta ``x-user-id``: el consultor aún
    no verificó su email y no tiene sesión durante esa ventana.
    """
    return await resolver.resolve(authorization, x_user_id)


def get_assignment_service(
    store: IDataStore = Depends(get_data_store),
    notifications: NotificationService = Depends(get_notification_service),
    repair_recorder: RepairTaskRecorder = Depends(get_repair_recorder),
) -> FarmerAssignmentService:
    return FarmerAssignmentService(store, notifications, repair_recorder)


def get_registration_service(
    store: IDataStore = Depends(get_data_store),
    notifications: NotificationService = Depends(get_notification_service),
    repair_recorder: RepairTaskRecorder = Depends(get_repair_recorder),
) -> ConsultantRegistrationService:
    return ConsultantRegistrationService(store, notifications, repair_recorder)


def get_unassigned_farmer_service(
    store: IDataStore = Depends(get_data_store),
) -> UnassignedFarmerService:
    return UnassignedFarmerService(store)

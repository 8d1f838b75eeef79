"""
Saga de vinculación agricultor -> consultor.

Precondiciones (en orden, cada una con su propio error):
1. El perfil llamador es consultor (403)
2. El registro del agricultor existe (404)
3. El agricultor no tiene consultor asignado (409 ``already_assigned``)
4. El ``profile_id`` enviado coincide con el del registro (400 ``profile_mismatch``)

Pasos:
- A (crítico, compensable): escritura condicional ``consultant_id IS NULL``
- B (crítico): activa el perfil del agricultor; si falla se deshace A
- C (best-effort): incremento atómico del contador del consultor
- D (best-effort): notificación a ambas partes en un solo lote

La comprobación 3 es solo un atajo para el caso común; la exclusión mutua
la garantiza la escritura condicional del paso A.
"""

import logging
from typing import Optional

from core.commands import (
    ActivateProfileCommand,
    AssignConsultantCommand,
    IncrementConsultantCounterCommand,
    NotifyFarmerConsultantLinkCommand,
)
from core.exceptions import BadRequestError, ConflictError, NotFoundError
from core.saga import MutationSaga, RepairRecorder
from models.profiles import ConsultantRecord, FarmerRecord, Profile, Role
from models.schemas import LinkFarmerResult
from repositories.interfaces import IDataStore
from services.identity_service import require_role
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class FarmerAssignmentService:
    """Vincula agricultores sin asignar al consultor autenticado."""

    def __init__(
        self,
        store: IDataStore,
        notification_service: NotificationService,
        repair_recorder: Optional[RepairRecorder] = None,
        compensation_timeout: Optional[float] = None,
    ):
        self._store = store
        self._notifications = notification_service
        self._repair_recorder = repair_recorder
        self._compensation_timeout = compensation_timeout

    async def link_farmer(
        self,
        consultant_profile: Profile,
        consultant: ConsultantRecord,
        farmer_id: str,
        farmer_profile_id: str,
    ) -> LinkFarmerResult:
        """
        Vincula el agricultor al consultor.

        Args:
            consultant_profile: Perfil resuelto del llamador
            consultant: Registro de consultor del llamador
            farmer_id: Id del registro ``farmers``
            farmer_profile_id: Id del perfil del agricultor

        Returns:
            LinkFarmerResult: Id del agricultor e id del registro de consultor

        Raises:
            ForbiddenError, NotFoundError, ConflictError, BadRequestError:
                Precondiciones
            RolledBackError: Falló el paso B y se deshizo el paso A
            CompensationFailedError: Falló también la compensación
        """
        require_role(consultant_profile, Role.CONSULTANT, "Only consultants can link farmers")
        farmer = await self._load_farmer(farmer_id)

        if farmer.is_assigned:
            raise ConflictError(
                "Farmer is already assigned to a consultant", code="already_assigned"
            )

        if farmer.profile_id != farmer_profile_id:
            raise BadRequestError(
                "Farmer profile ID mismatch",
                code="profile_mismatch",
                errors={"farmerProfileId": "Does not match the farmer record"},
            )

        saga = MutationSaga(
            "farmer_assignment",
            compensation_timeout=self._compensation_timeout,
            repair_recorder=self._repair_recorder,
        )
        saga.add_command(
            AssignConsultantCommand(self._store, farmer.id, consultant_profile.id)
        ).add_command(
            ActivateProfileCommand(self._store, farmer_profile_id)
        ).add_command(
            IncrementConsultantCounterCommand(self._store, consultant.id)
        ).add_command(
            NotifyFarmerConsultantLinkCommand(
                self._store,
                self._notifications,
                farmer_profile_id,
                consultant_profile.id,
                consultant_profile.full_name,
            )
        )

        await saga.execute()

        logger.info(
            f"🤝 Farmer {farmer.id} linked to consultant {consultant.id} "
            f"(profile {consultant_profile.id})"
        )
        return LinkFarmerResult(farmer_id=farmer.id, consultant_id=consultant.id)

    async def _load_farmer(self, farmer_id: str) -> FarmerRecord:
        try:
            row = await self._store.find_one(
                "farmers", {"id": farmer_id}, columns="id, consultant_id, profile_id"
            )
        except NotFoundError as exc:
            raise NotFoundError("Farmer not found") from exc
        return FarmerRecord.model_validate(row)

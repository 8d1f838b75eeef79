"""
Saga de finalización del registro de consultores.

Pasos:
- A (best-effort): avatar en ``profiles.avatar_url``
- B (crítico, sin compensación): ubicación y documentos en ``consultants``
- C (best-effort, solo con documentos): solicitud de revisión con la
  metadata de documentos categorizada
- D (best-effort): notificación de bienvenida al propio consultor

Solo el fallo del paso B se reporta al llamador. La operación es
idempotente a nivel de campo: reenviar el mismo payload sobrescribe
con los mismos valores.
"""

import logging
from typing import Any, Dict, Optional

from core.commands import (
    CreateApprovalRequestCommand,
    DispatchNotificationCommand,
    UpdateAvatarCommand,
    UpdateConsultantRecordCommand,
)
from core.saga import MutationSaga, RepairRecorder
from models.notifications import NotificationKind
from models.profiles import Profile, Role
from models.schemas import ConsultantRegistrationRequest
from repositories.interfaces import IDataStore
from services.identity_service import require_role
from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

REGISTRATION_WELCOME_MESSAGE = (
    "Your consultant application has been submitted. Our team will review "
    "your credentials within 2-3 business days."
)
REGISTRATION_COMPLETED_MESSAGE = "Registration completed successfully"


class ConsultantRegistrationService:
    """Completa el registro profesional de un consultor."""

    def __init__(
        self,
        store: IDataStore,
        notification_service: NotificationService,
        repair_recorder: Optional[RepairRecorder] = None,
    ):
        self._store = store
        self._notifications = notification_service
        self._repair_recorder = repair_recorder

    def build_saga(
        self, profile: Profile, payload: ConsultantRegistrationRequest
    ) -> MutationSaga:
        """Arma los pasos de la saga para el payload ya validado."""
        saga = MutationSaga("consultant_registration", repair_recorder=self._repair_recorder)

        if payload.avatar_url:
            saga.add_command(UpdateAvatarCommand(self._store, profile.id, payload.avatar_url))

        saga.add_command(
            UpdateConsultantRecordCommand(
                self._store, profile.id, payload.consultant_updates()
            )
        )

        if payload.document_urls:
            saga.add_command(
                CreateApprovalRequestCommand(
                    self._store, profile.id, list(payload.document_urls)
                )
            )

        saga.add_command(
            DispatchNotificationCommand(
                self._notifications,
                NotificationKind.WELCOME,
                profile.id,
                {"message": REGISTRATION_WELCOME_MESSAGE},
            )
        )
        return saga

    async def complete_registration(
        self, profile: Profile, payload: ConsultantRegistrationRequest
    ) -> Dict[str, Any]:
        """
        Ejecuta la saga de registro.

        Returns:
            Dict[str, Any]: ``{"success": True, "message": ...}``

        Raises:
            ForbiddenError: Si el perfil no es consultor
            InternalError: Si falla la escritura del registro de consultor
            NotFoundError: Si el perfil no tiene registro de consultor
        """
        require_role(profile, Role.CONSULTANT, "Only consultants can complete registration")

        saga = self.build_saga(profile, payload)
        result = await saga.execute()
        if result["best_effort_failures"]:
            status = saga.get_status()
            logger.warning(
                f"⚠️ Registro de {profile.id} completado con pasos omitidos: "
                f"{status['best_effort_failures']}",
                extra={"profile_id": profile.id, "saga_status": status},
            )
        else:
            logger.info(f"✅ Registro de consultor completado: {profile.id}")

        return {"success": True, "message": REGISTRATION_COMPLETED_MESSAGE}

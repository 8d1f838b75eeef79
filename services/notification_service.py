"""
Servicio de notificaciones.

Este módulo resuelve el tipo de notificación contra el registro de
plantillas, construye la fila y la persiste con el cliente privilegiado
(service role). Cada invocación hace exactamente una llamada al almacén y
no reintenta: los fallos se propagan al llamador, que decide si el paso es
crítico o best-effort.

También expone las operaciones del destinatario (marcar como leída,
listar, eliminar) y los helpers ``notify_*`` usados por los flujos.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from core.exceptions import BadRequestError, NotFoundError
from models.notifications import (
    NotificationCategory,
    NotificationContext,
    NotificationKind,
    NotificationRow,
)
from repositories.interfaces import IDataStore, QueryPage
from templates.notifications import get_template

logger = logging.getLogger(__name__)

NOTIFICATIONS_TABLE = "notifications"

NotificationInput = Union[NotificationRow, Dict[str, Any]]


class NotificationService:
    """
    Despachador de notificaciones sobre ``IDataStore``.

    Características:
    - ``dispatch`` inserta una fila construida desde la plantilla
    - ``dispatch_many`` inserta un lote en una sola llamada (todo o nada)
    - Sin reintentos ni estado en memoria
    """

    def __init__(self, store: IDataStore):
        self._store = store

    # ========================================================================
    # Construcción y despacho
    # ========================================================================

    def build_notification(
        self,
        kind: Union[NotificationKind, str],
        recipient_id: str,
        context: Optional[NotificationContext] = None,
        expires_at: Optional[datetime] = None,
    ) -> NotificationRow:
        """
        Construye la fila de una notificación a partir de su plantilla.

        Args:
            kind: Tipo de notificación
            recipient_id: Perfil destinatario
            context: Datos para los generadores de la plantilla
            expires_at: Expiración opcional

        Returns:
            NotificationRow: Fila lista para insertar

        Raises:
            UnknownNotificationKindError: Si no hay plantilla para ``kind``
            BadRequestError: Si falta un campo obligatorio del contexto
        """
        template = get_template(kind)
        ctx = dict(context or {})

        try:
            title = template.generate_title(ctx)
            message = template.generate_message(ctx)
            action_url = (
                template.generate_action_url(ctx)
                if template.generate_action_url
                else None
            )
            metadata = (
                template.generate_metadata(ctx) if template.generate_metadata else None
            )
        except KeyError as exc:
            field = exc.args[0] if exc.args else "context"
            raise BadRequestError(
                f"Missing required context field '{field}' for notification type "
                f"'{template.kind.value}'",
                errors={str(field): "This field is required"},
                code="missing_context",
            ) from exc

        return NotificationRow(
            recipient_id=recipient_id,
            type=template.kind,
            category=template.category,
            priority=template.priority,
            title=title,
            message=message,
            action_url=action_url,
            metadata=metadata,
            expires_at=expires_at,
        )

    async def dispatch(
        self,
        kind: Union[NotificationKind, str],
        recipient_id: str,
        context: Optional[NotificationContext] = None,
    ) -> Dict[str, Any]:
        """
        Crea una notificación usando la plantilla registrada.

        Returns:
            Dict[str, Any]: Fila insertada

        Raises:
            UnknownNotificationKindError: Si no hay plantilla para ``kind``
            RepositoryError: Si falla la inserción
        """
        row = self.build_notification(kind, recipient_id, context)
        inserted = await self._store.insert(NOTIFICATIONS_TABLE, row.to_row())
        logger.info(f"🔔 Notificación {row.type} creada para {recipient_id}")
        return inserted

    async def create(self, notification: NotificationInput) -> Dict[str, Any]:
        """Inserta una notificación ya construida (sin plantilla)."""
        return await self._store.insert(NOTIFICATIONS_TABLE, _as_row(notification))

    async def dispatch_many(
        self, notifications: Sequence[NotificationInput]
    ) -> List[Dict[str, Any]]:
        """
        Inserta varias notificaciones en una sola llamada.

        Una lista vacía no toca el almacén. Si la llamada falla no se inserta
        ninguna fila; quien necesite éxito independiente por fila debe usar
        ``dispatch`` en un bucle.
        """
        if not notifications:
            return []

        rows = [_as_row(notification) for notification in notifications]
        inserted = await self._store.insert_many(NOTIFICATIONS_TABLE, rows)
        logger.info(f"🔔 {len(rows)} notificaciones creadas en lote")
        return inserted

    # ========================================================================
    # Operaciones del destinatario
    # ========================================================================

    async def mark_as_read(
        self, notification_id: str, recipient_id: Optional[str] = None
    ) -> None:
        """
        Marca una notificación como leída.

        Si se indica ``recipient_id`` la escritura solo procede cuando la
        notificación pertenece a ese destinatario.

        Raises:
            NotFoundError: Si no existe (o no pertenece al destinatario)
        """
        where: Dict[str, Any] = {}
        if recipient_id is not None:
            where["recipient_id"] = recipient_id

        affected = await self._store.conditional_update(
            NOTIFICATIONS_TABLE,
            notification_id,
            {"is_read": True, "read_at": _utc_now_iso()},
            where,
        )
        if affected == 0:
            raise NotFoundError("Notification not found")

    async def mark_all_as_read(self, recipient_id: str) -> int:
        """Marca como leídas las notificaciones no leídas del destinatario."""
        updated = await self._store.update_where(
            NOTIFICATIONS_TABLE,
            {"recipient_id": recipient_id, "is_read": False},
            {"is_read": True, "read_at": _utc_now_iso()},
        )
        logger.info(f"📭 {updated} notificaciones marcadas como leídas para {recipient_id}")
        return updated

    async def list_for_recipient(
        self,
        recipient_id: str,
        limit: int = 20,
        offset: int = 0,
        unread_only: bool = False,
        category: Optional[Union[NotificationCategory, str]] = None,
    ) -> QueryPage:
        """Lista las notificaciones del destinatario, más recientes primero."""
        filters: Dict[str, Any] = {"recipient_id": recipient_id}
        if unread_only:
            filters["is_read"] = False
        if category:
            filters["category"] = NotificationCategory(category).value

        return await self._store.find_many(
            NOTIFICATIONS_TABLE,
            filters=filters,
            order_by="created_at",
            descending=True,
            limit=limit,
            offset=offset,
            with_count=True,
        )

    async def delete(self, notification_id: str) -> None:
        """Elimina una notificación; NotFoundError si no existe."""
        deleted = await self._store.delete(NOTIFICATIONS_TABLE, notification_id)
        if deleted == 0:
            raise NotFoundError("Notification not found")


def _as_row(notification: NotificationInput) -> Dict[str, Any]:
    if isinstance(notification, NotificationRow):
        return notification.to_row()
    return NotificationRow.model_validate(notification).to_row()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# Helpers por evento
# ============================================================================


async def notify_consultant_assigned(
    service: NotificationService,
    farmer_profile_id: str,
    consultant_name: str,
    consultant_id: str,
) -> Dict[str, Any]:
    """Notifica al agricultor que tiene un consultor asignado."""
    return await service.dispatch(
        NotificationKind.CONSULTANT_ASSIGNED,
        farmer_profile_id,
        {"consultantName": consultant_name, "consultantId": consultant_id},
    )


async def notify_farmer_linked(
    service: NotificationService,
    consultant_profile_id: str,
    farmer_name: str,
    farmer_id: str,
) -> Dict[str, Any]:
    """Notifica al consultor que un agricultor se agregó a su red."""
    return await service.dispatch(
        NotificationKind.FARMER_LINKED,
        consultant_profile_id,
        {"farmerName": farmer_name, "farmerId": farmer_id},
    )


async def notify_farmer_consultant_link(
    service: NotificationService,
    farmer_profile_id: str,
    farmer_name: str,
    consultant_profile_id: str,
    consultant_name: str,
) -> List[Dict[str, Any]]:
    """Notifica a ambas partes de una vinculación en un único lote."""
    rows = [
        service.build_notification(
            NotificationKind.CONSULTANT_ASSIGNED,
            farmer_profile_id,
            {"consultantName": consultant_name, "consultantId": consultant_profile_id},
        ),
        service.build_notification(
            NotificationKind.FARMER_LINKED,
            consultant_profile_id,
            {"farmerName": farmer_name, "farmerId": farmer_profile_id},
        ),
    ]
    return await service.dispatch_many(rows)


async def notify_consultant_removed(
    service: NotificationService,
    farmer_profile_id: str,
    consultant_name: str,
    consultant_id: str,
    reason: Optional[str] = None,
) -> Dict[str, Any]:
    return await service.dispatch(
        NotificationKind.CONSULTANT_REMOVED,
        farmer_profile_id,
        {
            "consultantName": consultant_name,
            "consultantId": consultant_id,
            "reason": reason,
        },
    )


async def notify_farmer_created(
    service: NotificationService,
    consultant_profile_id: str,
    farmer_name: str,
    farmer_id: str,
) -> Dict[str, Any]:
    return await service.dispatch(
        NotificationKind.FARMER_CREATED,
        consultant_profile_id,
        {"farmerName": farmer_name, "farmerId": farmer_id},
    )


async def notify_account_activated(
    service: NotificationService, farmer_profile_id: str
) -> Dict[str, Any]:
    return await service.dispatch(NotificationKind.ACCOUNT_ACTIVATED, farmer_profile_id)


async def notify_farm_setup(
    service: NotificationService,
    farmer_profile_id: str,
    farm_name: str,
    land_size: float,
    crops: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return await service.dispatch(
        NotificationKind.FARM_SETUP,
        farmer_profile_id,
        {"farmName": farm_name, "landSize": land_size, "crops": crops},
    )


async def notify_profile_update(
    service: NotificationService,
    recipient_id: str,
    updated_by: Optional[str] = None,
) -> Dict[str, Any]:
    return await service.dispatch(
        NotificationKind.PROFILE_UPDATE, recipient_id, {"updatedBy": updated_by}
    )


async def notify_security_alert(
    service: NotificationService,
    recipient_id: str,
    alert_type: str,
    message: str,
    action_url: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return await service.dispatch(
        NotificationKind.SECURITY_ALERT,
        recipient_id,
        {
            "alertType": alert_type,
            "message": message,
            "actionUrl": action_url,
            "metadata": metadata,
        },
    )


async def notify_approval_status(
    service: NotificationService,
    consultant_profile_id: str,
    approved: bool,
    reason: Optional[str] = None,
) -> Dict[str, Any]:
    """Notifica al consultor la resolución de su solicitud."""
    kind = (
        NotificationKind.APPROVAL_SUCCESS if approved else NotificationKind.APPROVAL_REJECTED
    )
    return await service.dispatch(kind, consultant_profile_id, {"reason": reason})


async def notify_avatar_updated(
    service: NotificationService, recipient_id: str
) -> Dict[str, Any]:
    return await service.dispatch(NotificationKind.AVATAR_UPDATED, recipient_id)


async def notify_settings_updated(
    service: NotificationService, consultant_profile_id: str
) -> Dict[str, Any]:
    return await service.dispatch(
        NotificationKind.SETTINGS_UPDATED, consultant_profile_id
    )

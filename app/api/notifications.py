"""
Endpoints de notificaciones del destinatario autenticado.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_authenticated_identity, get_notification_service
from models.notifications import NotificationCategory
from models.schemas import ApiResponse
from services.identity_service import ResolvedIdentity
from services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("")
async def list_notifications(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
    category: Optional[NotificationCategory] = Query(None),
    identity: ResolvedIdentity = Depends(get_authenticated_identity),
    service: NotificationService = Depends(get_notification_service),
) -> dict:
    """Lista las notificaciones del llamador, más recientes primero."""
    page = await service.list_for_recipient(
        identity.profile.id,
        limit=limit,
        offset=offset,
        unread_only=unread_only,
        category=category,
    )
    return ApiResponse(
        success=True,
        data={"notifications": page.rows, "total": page.total or 0},
    ).to_body()


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    identity: ResolvedIdentity = Depends(get_authenticated_identity),
    service: NotificationService = Depends(get_notification_service),
) -> dict:
    await service.mark_as_read(notification_id, recipient_id=identity.profile.id)
    return ApiResponse(success=True, message="Notification marked as read").to_body()


@router.post("/read-all")
async def mark_all_notifications_read(
    identity: ResolvedIdentity = Depends(get_authenticated_identity),
    service: NotificationService = Depends(get_notification_service),
) -> dict:
    updated = await service.mark_all_as_read(identity.profile.id)
    return ApiResponse(success=True, data={"updated": updated}).to_body()

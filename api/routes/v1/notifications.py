"""Notification endpoints."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_identity
from api.schemas.common import UpdatedCountResponse
from api.schemas.communications import NotificationResponse
from api.services import notifications as notification_service
from core.exceptions import ResourceNotFound
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationResponse], summary="List Notifications")
async def list_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    limit: int = Query(50, ge=1, le=200),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    """The caller's notifications, newest first."""
    return await notification_service.list_notifications(db, identity, unread_only, limit)


@router.patch("/read", response_model=UpdatedCountResponse, summary="Mark All Read")
async def mark_all_read(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    updated = await notification_service.mark_all_read(db, identity)
    return UpdatedCountResponse(success=True, updated=updated)


@router.patch(
    "/{notification_id}/read",
    response_model=UpdatedCountResponse,
    summary="Mark Notification Read",
)
async def mark_read(
    notification_id: str = Path(..., description="Notification ID"),
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    updated = await notification_service.mark_read(db, identity, notification_id)
    if not updated:
        raise ResourceNotFound("Notification not found")
    return UpdatedCountResponse(success=True, updated=updated)

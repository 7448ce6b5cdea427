"""
In-app notification endpoints for the signed-in user.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from stars.auth import CurrentUser, get_current_user, require_admin
from stars.dependencies import get_notification_service
from stars.exceptions import parse_uuid
from stars.models import (
    LoginDigestRequest,
    LoginDigestResponse,
    MarkAllReadResponse,
    NotificationFilter,
    NotificationResponse,
    UnreadCountResponse,
)
from stars.services import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    filter: Optional[NotificationFilter] = Query(None, description="'unread' or a notification type"),
    limit: int = Query(50, ge=1, le=200),
    user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return await service.list_filtered(user.id, filter=filter, limit=limit)


@router.get("/unread", response_model=List[NotificationResponse])
async def list_unread(
    user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return await service.list_unread(user.id)


@router.get("/recent", response_model=List[NotificationResponse])
async def list_recent(
    limit: int = Query(20, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return await service.list_recent(user.id, limit=limit)


@router.get("/count", response_model=UnreadCountResponse)
async def count_unread(
    user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(user_id=str(user.id), unread=await service.count_unread(user.id))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_as_read(
    user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = await service.mark_all_as_read(user.id)
    return MarkAllReadResponse(user_id=str(user.id), updated=updated)


@router.post("/login-digest", response_model=LoginDigestResponse)
async def send_login_digest(
    data: LoginDigestRequest,
    user: CurrentUser = Depends(require_admin),
    service: NotificationService = Depends(get_notification_service),
):
    """Email the admins a summary of client logins since ``since``."""
    return await service.send_login_digest(data.since)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return await service.mark_as_read(parse_uuid(notification_id, field="notification_id"), user_id=user.id)

"""
Dashboard activity feed.
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from stars.auth import CurrentUser, require_admin
from stars.dependencies import get_activity_service
from stars.models import ActivityLogEntryResponse
from stars.services import ActivityService

router = APIRouter(prefix="/activity", tags=["Activity"])


@router.get("/recent", response_model=List[ActivityLogEntryResponse])
async def get_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(require_admin),
    service: ActivityService = Depends(get_activity_service),
):
    """Most recent pipeline activity across all positions."""
    return await service.get_recent(limit=limit)

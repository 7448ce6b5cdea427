"""
Email delivery log endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from stars.auth import CurrentUser, require_admin
from stars.dependencies import get_email_log_service
from stars.exceptions import parse_uuid
from stars.models import EmailLogResponse
from stars.services import EmailLogService

router = APIRouter(prefix="/emails", tags=["Emails"])


@router.get("/log", response_model=List[EmailLogResponse])
async def list_email_log(
    event_type: Optional[str] = Query(None, alias="eventType"),
    candidate_position_id: Optional[str] = Query(None, alias="candidatePositionId"),
    limit: int = Query(50, ge=1, le=200),
    user: CurrentUser = Depends(require_admin),
    service: EmailLogService = Depends(get_email_log_service),
):
    """Sent and failed emails, newest first."""
    cp_uuid = parse_uuid(candidate_position_id, field="candidate_position_id") if candidate_position_id else None
    return await service.list_entries(
        related_event_type=event_type,
        related_candidate_position_id=cp_uuid,
        limit=limit,
    )

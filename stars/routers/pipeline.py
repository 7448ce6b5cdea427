"""
Pipeline endpoints: assignments, stage changes and comments.

Every mutation names its acting user in the body (``userId``/``userName``).
The acting user must be the signed-in user, and clients only reach candidate
positions on their own organization's positions.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from stars.auth import AuthorizationError, CurrentUser, get_current_user, require_admin
from stars.dependencies import get_activity_service, get_position_service, get_workflow_service
from stars.exceptions import parse_uuid
from stars.models import (
    ActivityLogEntryResponse,
    AssignCandidateRequest,
    AssignCandidateResponse,
    CandidatePositionResponse,
    CommentCreate,
    CommentCreateResponse,
    CommentResponse,
    CountResponse,
    StageChangeRequest,
)
from stars.routers.organizations import ensure_org_access
from stars.services import ActivityService, PositionService, StageWorkflowService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pipeline", tags=["Pipeline"])


def ensure_actor(user: CurrentUser, acting_user_id: str) -> None:
    """Reject a mutation made on behalf of someone other than the caller."""
    if parse_uuid(acting_user_id, field="user_id") != user.id:
        logger.warning(f"User {user.id} attempted to act as {acting_user_id}")
        raise AuthorizationError("userId must match the signed-in user")


async def ensure_pipeline_access(
    user: CurrentUser,
    cp_id: str,
    service: StageWorkflowService,
    positions: PositionService,
) -> CandidatePositionResponse:
    """
    Load a candidate position the caller may see.

    Clients are limited to candidate positions on their organization's
    positions.

    Raises:
        NotFoundError: The candidate position does not exist
        AuthorizationError: The position belongs to another organization
    """
    cp = await service.get_candidate_position(cp_id)
    if not user.is_admin:
        position = await positions.get(parse_uuid(cp.position_id, field="position_id"))
        ensure_org_access(user, parse_uuid(position.org_id, field="org_id"))
    return cp


@router.post("/assignments", response_model=AssignCandidateResponse, status_code=201)
async def assign_candidate(
    data: AssignCandidateRequest,
    user: CurrentUser = Depends(require_admin),
    service: StageWorkflowService = Depends(get_workflow_service),
):
    """Put a candidate into a position's pipeline at stage ``submitted``."""
    ensure_actor(user, data.user_id)
    cp_id = await service.assign_candidate(
        candidate_id=data.candidate_id,
        position_id=data.position_id,
        acting_user_id=data.user_id,
        acting_user_name=data.user_name,
    )
    return AssignCandidateResponse(candidate_position_id=cp_id)


@router.get("/count", response_model=CountResponse)
async def count_candidate_positions(
    user: CurrentUser = Depends(require_admin),
    service: StageWorkflowService = Depends(get_workflow_service),
):
    return CountResponse(count=await service.count_all())


@router.get("/stages/{stage}", response_model=List[CandidatePositionResponse])
async def list_by_stage(
    stage: str,
    user: CurrentUser = Depends(require_admin),
    service: StageWorkflowService = Depends(get_workflow_service),
):
    return await service.list_by_stage(stage)


@router.get("/positions/{position_id}", response_model=List[CandidatePositionResponse])
async def list_position_pipeline(
    position_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
    positions: PositionService = Depends(get_position_service),
):
    """All candidates in one position's pipeline."""
    position = await positions.get(parse_uuid(position_id, field="position_id"))
    ensure_org_access(user, parse_uuid(position.org_id, field="org_id"))
    return await service.list_by_position(position.id)


@router.get("/candidates/{candidate_id}", response_model=List[CandidatePositionResponse])
async def list_candidate_positions(
    candidate_id: str,
    user: CurrentUser = Depends(require_admin),
    service: StageWorkflowService = Depends(get_workflow_service),
):
    return await service.list_by_candidate(candidate_id)


@router.get("/{cp_id}", response_model=CandidatePositionResponse)
async def get_candidate_position(
    cp_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
    positions: PositionService = Depends(get_position_service),
):
    return await ensure_pipeline_access(user, cp_id, service, positions)


@router.patch("/{cp_id}/stage", status_code=204)
async def change_stage(
    cp_id: str,
    data: StageChangeRequest,
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
    positions: PositionService = Depends(get_position_service),
):
    """
    Move a candidate to another stage.

    Any stage may follow any other. Notifies the other side and, for
    interview/approved/rejected, sends the workflow email.
    """
    ensure_actor(user, data.user_id)
    await ensure_pipeline_access(user, cp_id, service, positions)
    await service.change_stage(
        candidate_position_id=cp_id,
        new_stage=data.stage,
        acting_user_id=data.user_id,
        acting_user_name=data.user_name,
    )


@router.get("/{cp_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    cp_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
    positions: PositionService = Depends(get_position_service),
):
    """Comments on a candidate position, newest first."""
    await ensure_pipeline_access(user, cp_id, service, positions)
    return await service.list_comments(cp_id)


@router.post("/{cp_id}/comments", response_model=CommentCreateResponse, status_code=201)
async def add_comment(
    cp_id: str,
    data: CommentCreate,
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
    positions: PositionService = Depends(get_position_service),
):
    ensure_actor(user, data.user_id)
    await ensure_pipeline_access(user, cp_id, service, positions)
    comment_id = await service.add_comment(
        body=data.body,
        candidate_position_id=cp_id,
        acting_user_id=data.user_id,
        acting_user_name=data.user_name,
    )
    return CommentCreateResponse(comment_id=comment_id)


@router.get("/{cp_id}/activity", response_model=List[ActivityLogEntryResponse])
async def get_activity_timeline(
    cp_id: str,
    limit: Optional[int] = Query(50, ge=1, le=200),
    user: CurrentUser = Depends(get_current_user),
    service: StageWorkflowService = Depends(get_workflow_service),
    positions: PositionService = Depends(get_position_service),
    activity: ActivityService = Depends(get_activity_service),
):
    """Audit timeline for a candidate position, newest first."""
    await ensure_pipeline_access(user, cp_id, service, positions)
    return await activity.get_timeline(cp_id, limit=limit)

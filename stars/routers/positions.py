"""
Position endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from stars.auth import CurrentUser, get_current_user, require_admin
from stars.dependencies import get_position_service
from stars.exceptions import parse_uuid
from stars.models import CountResponse, PositionCreate, PositionResponse, PositionStatusUpdate
from stars.routers.organizations import ensure_org_access
from stars.services import PositionService

router = APIRouter(prefix="/positions", tags=["Positions"])


@router.get("", response_model=List[PositionResponse])
async def list_positions(
    org_id: str = Query(..., alias="orgId", description="Organization to list positions for"),
    user: CurrentUser = Depends(get_current_user),
    service: PositionService = Depends(get_position_service),
):
    org_uuid = parse_uuid(org_id, field="org_id")
    ensure_org_access(user, org_uuid)
    return await service.list_by_org(org_uuid)


@router.get("/count/open", response_model=CountResponse)
async def count_open_positions(
    user: CurrentUser = Depends(require_admin),
    service: PositionService = Depends(get_position_service),
):
    return CountResponse(count=await service.count_open())


@router.post("", response_model=PositionResponse, status_code=201)
async def create_position(
    data: PositionCreate,
    user: CurrentUser = Depends(require_admin),
    service: PositionService = Depends(get_position_service),
):
    return await service.create(data)


@router.get("/{position_id}", response_model=PositionResponse)
async def get_position(
    position_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: PositionService = Depends(get_position_service),
):
    position = await service.get(parse_uuid(position_id, field="position_id"))
    ensure_org_access(user, parse_uuid(position.org_id, field="org_id"))
    return position


@router.patch("/{position_id}/status", response_model=PositionResponse)
async def set_position_status(
    position_id: str,
    data: PositionStatusUpdate,
    user: CurrentUser = Depends(require_admin),
    service: PositionService = Depends(get_position_service),
):
    """Open or close a position."""
    return await service.set_status(parse_uuid(position_id, field="position_id"), data.status)

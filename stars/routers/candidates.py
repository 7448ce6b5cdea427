"""
Candidate endpoints: the shared candidate pool and candidate files.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from stars.auth import CurrentUser, get_current_user, require_admin
from stars.dependencies import get_candidate_service
from stars.exceptions import parse_uuid
from stars.models import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListResponse,
    CandidateDetailResponse,
    CandidateFileCreate,
    CandidateFileResponse,
)
from stars.services import CandidateService

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get("", response_model=List[CandidateListResponse])
async def list_candidates(
    search: Optional[str] = Query(None, description="Match name, current role or company"),
    user: CurrentUser = Depends(require_admin),
    service: CandidateService = Depends(get_candidate_service),
):
    """List candidates with the number of positions each is assigned to."""
    return await service.list_candidates(search=search)


@router.post("", response_model=CandidateResponse, status_code=201)
async def create_candidate(
    data: CandidateCreate,
    user: CurrentUser = Depends(require_admin),
    service: CandidateService = Depends(get_candidate_service),
):
    return await service.create(data)


@router.get("/{candidate_id}", response_model=CandidateDetailResponse)
async def get_candidate(
    candidate_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: CandidateService = Depends(get_candidate_service),
):
    return await service.get(parse_uuid(candidate_id, field="candidate_id"))


@router.patch("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    candidate_id: str,
    data: CandidateUpdate,
    user: CurrentUser = Depends(require_admin),
    service: CandidateService = Depends(get_candidate_service),
):
    return await service.update(parse_uuid(candidate_id, field="candidate_id"), data)


@router.get("/{candidate_id}/files", response_model=List[CandidateFileResponse])
async def list_candidate_files(
    candidate_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: CandidateService = Depends(get_candidate_service),
):
    return await service.list_files(parse_uuid(candidate_id, field="candidate_id"))


@router.post("/{candidate_id}/files", response_model=CandidateFileResponse, status_code=201)
async def add_candidate_file(
    candidate_id: str,
    data: CandidateFileCreate,
    user: CurrentUser = Depends(require_admin),
    service: CandidateService = Depends(get_candidate_service),
):
    """Record a file that has already been uploaded to storage."""
    return await service.add_file(parse_uuid(candidate_id, field="candidate_id"), data)

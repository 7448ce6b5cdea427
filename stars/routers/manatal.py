"""
Manatal ATS endpoints: browse the ATS and import candidates.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from stars.auth import CurrentUser, require_admin
from stars.dependencies import get_import_service, get_manatal_client
from stars.models import (
    ImportCandidateRequest,
    ImportResult,
    ManatalCandidate,
    ManatalJob,
    ManatalSearchResponse,
)
from stars.services import ImportService, ManatalClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/manatal", tags=["Manatal"])


@router.get("/search", response_model=ManatalSearchResponse)
async def search_candidates(
    q: str = Query(..., min_length=1, description="Candidate name"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(require_admin),
    client: ManatalClient = Depends(get_manatal_client),
):
    return await client.search_candidates(q, page=page, page_size=page_size)


@router.get("/jobs", response_model=List[ManatalJob])
async def list_jobs(
    user: CurrentUser = Depends(require_admin),
    client: ManatalClient = Depends(get_manatal_client),
):
    """Open jobs in Manatal."""
    return await client.list_open_jobs()


@router.get("/candidates/{manatal_id}", response_model=ManatalCandidate)
async def get_candidate(
    manatal_id: int,
    user: CurrentUser = Depends(require_admin),
    client: ManatalClient = Depends(get_manatal_client),
):
    return await client.get_candidate(manatal_id)


@router.post("/import", response_model=ImportResult, status_code=201)
async def import_candidate(
    data: ImportCandidateRequest,
    user: CurrentUser = Depends(require_admin),
    service: ImportService = Depends(get_import_service),
):
    """
    Import a Manatal candidate into the local pool.

    History and resume problems come back as warnings; the import itself
    still succeeds.
    """
    logger.info(f"User {user.id} importing Manatal candidate {data.manatal_id}")
    return await service.import_candidate(data.manatal_id)

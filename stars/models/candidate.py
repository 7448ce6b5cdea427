"""
Candidate and candidate file models.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import Field

from .common import CamelModel


class CandidateBase(CamelModel):
    """Base candidate fields."""
    full_name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    current_role: Optional[str] = None
    current_company: Optional[str] = None
    summary: Optional[str] = None


class CandidateCreate(CandidateBase):
    """Request model for creating a candidate by hand."""
    external_ref: Optional[str] = None


class CandidateUpdate(CamelModel):
    """Request model for updating a candidate."""
    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    current_role: Optional[str] = None
    current_company: Optional[str] = None
    summary: Optional[str] = None


class CandidateResponse(CandidateBase):
    """Response model for a candidate."""
    id: str
    external_ref: Optional[str] = None
    manatal_id: Optional[int] = None
    manatal_url: Optional[str] = None
    manatal_imported_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class CandidateListResponse(CandidateResponse):
    """Response model for the candidate list (includes computed fields)."""
    position_count: int = 0


class CandidateFileCreate(CamelModel):
    file_url: str
    file_name: str
    file_type: str


class CandidateFileResponse(CamelModel):
    id: str
    candidate_id: str
    file_url: str
    file_name: str
    file_type: str
    uploaded_at: datetime


class CandidateDetailResponse(CandidateResponse):
    files: List[CandidateFileResponse] = []

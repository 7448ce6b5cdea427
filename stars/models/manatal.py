"""
Pydantic models for the Manatal ATS API and the candidate import.
"""
from typing import Optional
from pydantic import BaseModel, Field

from .common import CamelModel


class ManatalCandidate(BaseModel):
    """Candidate record as returned by Manatal (snake_case on the wire)."""
    id: int
    full_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    current_position: Optional[str] = None
    current_company: Optional[str] = None
    description: Optional[str] = None
    resume: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ManatalEducation(BaseModel):
    id: Optional[int] = None
    school: Optional[str] = None
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None


class ManatalExperience(BaseModel):
    id: Optional[int] = None
    company: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    is_current: bool = False


class ManatalSearchResponse(BaseModel):
    results: list[ManatalCandidate] = Field(default_factory=list)
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None


class ManatalJob(BaseModel):
    id: int
    position_name: Optional[str] = None
    status: Optional[str] = None
    organization: Optional[int] = None
    description: Optional[str] = None


class ImportCandidateRequest(CamelModel):
    manatal_id: int = Field(..., ge=1)


class ImportResult(CamelModel):
    """Outcome of importing one ATS candidate."""
    candidate_id: str
    success: bool = True
    has_resume: bool = False
    warnings: list[str] = Field(default_factory=list)

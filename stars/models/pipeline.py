"""
Pipeline models: candidate-position assignments, stage changes, comments
and the activity log.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from .common import CamelModel
from .enums import Stage


class ActorFields(CamelModel):
    """The acting user, sent with every workflow mutation."""
    user_id: str
    user_name: str = Field(..., min_length=1)


class AssignCandidateRequest(ActorFields):
    candidate_id: str
    position_id: str


class AssignCandidateResponse(CamelModel):
    candidate_position_id: str


class StageChangeRequest(ActorFields):
    # Plain string so unknown values surface as InvalidStageError
    stage: str


class CandidatePositionResponse(CamelModel):
    id: str
    candidate_id: str
    position_id: str
    stage: Stage
    created_at: datetime
    updated_at: datetime
    last_interaction_at: datetime
    candidate_name: Optional[str] = None
    position_title: Optional[str] = None


class CommentCreate(ActorFields):
    body: str


class CommentCreateResponse(CamelModel):
    comment_id: str


class CommentResponse(CamelModel):
    id: str
    body: str
    user_id: str
    user_name: str
    candidate_position_id: str
    created_at: datetime


class ActivityLogEntryResponse(CamelModel):
    """A single, immutable audit entry."""
    id: str
    action: str
    from_stage: Optional[str] = None
    to_stage: Optional[str] = None
    user_id: str
    user_name: str
    candidate_position_id: str
    created_at: datetime


class LoginResponse(CamelModel):
    user_id: str
    notified_admins: bool

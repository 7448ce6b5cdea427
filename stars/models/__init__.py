"""
S.T.A.R.S API Models.

This module re-exports all model classes for convenient importing.
"""

# Common models
from .common import CamelModel, PaginatedResponse

# Enums
from .enums import (
    UserRole,
    PositionStatus,
    Stage,
    ActivityAction,
    NotificationType,
    EmailStatus,
)

# Organization and user models
from .organization import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
    UserCreate,
    UserResponse,
    UserActiveUpdate,
)

# Position models
from .position import (
    PositionCreate,
    PositionStatusUpdate,
    PositionResponse,
    CountResponse,
)

# Candidate models
from .candidate import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListResponse,
    CandidateDetailResponse,
    CandidateFileCreate,
    CandidateFileResponse,
)

# Pipeline models
from .pipeline import (
    AssignCandidateRequest,
    AssignCandidateResponse,
    StageChangeRequest,
    CandidatePositionResponse,
    CommentCreate,
    CommentCreateResponse,
    CommentResponse,
    ActivityLogEntryResponse,
    LoginResponse,
)

# Notification and email models
from .notification import (
    NotificationFilter,
    NotificationResponse,
    UnreadCountResponse,
    MarkAllReadResponse,
    LoginDigestRequest,
    LoginDigestResponse,
    EmailJob,
    EmailLogResponse,
)

# ATS models
from .manatal import (
    ManatalCandidate,
    ManatalEducation,
    ManatalExperience,
    ManatalSearchResponse,
    ManatalJob,
    ImportCandidateRequest,
    ImportResult,
)

__all__ = [
    # Common
    "CamelModel",
    "PaginatedResponse",
    # Enums
    "UserRole",
    "PositionStatus",
    "Stage",
    "ActivityAction",
    "NotificationType",
    "EmailStatus",
    # Organization / user
    "OrganizationCreate",
    "OrganizationUpdate",
    "OrganizationResponse",
    "UserCreate",
    "UserResponse",
    "UserActiveUpdate",
    # Position
    "PositionCreate",
    "PositionStatusUpdate",
    "PositionResponse",
    "CountResponse",
    # Candidate
    "CandidateCreate",
    "CandidateUpdate",
    "CandidateResponse",
    "CandidateListResponse",
    "CandidateDetailResponse",
    "CandidateFileCreate",
    "CandidateFileResponse",
    # Pipeline
    "AssignCandidateRequest",
    "AssignCandidateResponse",
    "StageChangeRequest",
    "CandidatePositionResponse",
    "CommentCreate",
    "CommentCreateResponse",
    "CommentResponse",
    "ActivityLogEntryResponse",
    "LoginResponse",
    # Notifications / email
    "NotificationFilter",
    "NotificationResponse",
    "UnreadCountResponse",
    "MarkAllReadResponse",
    "LoginDigestRequest",
    "LoginDigestResponse",
    "EmailJob",
    "EmailLogResponse",
    # ATS
    "ManatalCandidate",
    "ManatalEducation",
    "ManatalExperience",
    "ManatalSearchResponse",
    "ManatalJob",
    "ImportCandidateRequest",
    "ImportResult",
]

"""
Repository layer for data access.
"""
from .organization_repo import OrganizationRepository
from .user_repo import UserRepository
from .position_repo import PositionRepository
from .candidate_repo import CandidateRepository, CandidateFileRepository
from .candidate_position_repo import CandidatePositionRepository
from .comment_repo import CommentRepository
from .activity_repo import ActivityLogRepository
from .notification_repo import NotificationRepository
from .email_log_repo import EmailLogRepository
from .store import PipelineStore

__all__ = [
    "OrganizationRepository",
    "UserRepository",
    "PositionRepository",
    "CandidateRepository",
    "CandidateFileRepository",
    "CandidatePositionRepository",
    "CommentRepository",
    "ActivityLogRepository",
    "NotificationRepository",
    "EmailLogRepository",
    "PipelineStore",
]

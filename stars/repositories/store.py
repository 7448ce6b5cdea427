"""
PipelineStore - one handle on every repository the services write through.
"""
import asyncpg
from dataclasses import dataclass

from .organization_repo import OrganizationRepository
from .user_repo import UserRepository
from .position_repo import PositionRepository
from .candidate_repo import CandidateRepository, CandidateFileRepository
from .candidate_position_repo import CandidatePositionRepository
from .comment_repo import CommentRepository
from .activity_repo import ActivityLogRepository
from .notification_repo import NotificationRepository
from .email_log_repo import EmailLogRepository


@dataclass
class PipelineStore:
    """
    Bundle of repositories, one per table.

    Services depend on this object rather than on a pool so that the same
    service code runs against Postgres or any object exposing the same
    async repository methods.
    """
    organizations: OrganizationRepository
    users: UserRepository
    positions: PositionRepository
    candidates: CandidateRepository
    candidate_files: CandidateFileRepository
    candidate_positions: CandidatePositionRepository
    comments: CommentRepository
    activity_log: ActivityLogRepository
    notifications: NotificationRepository
    email_log: EmailLogRepository

    @classmethod
    def from_pool(cls, pool: asyncpg.Pool) -> "PipelineStore":
        return cls(
            organizations=OrganizationRepository(pool),
            users=UserRepository(pool),
            positions=PositionRepository(pool),
            candidates=CandidateRepository(pool),
            candidate_files=CandidateFileRepository(pool),
            candidate_positions=CandidatePositionRepository(pool),
            comments=CommentRepository(pool),
            activity_log=ActivityLogRepository(pool),
            notifications=NotificationRepository(pool),
            email_log=EmailLogRepository(pool),
        )

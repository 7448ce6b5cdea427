"""
Service layer for business logic.
"""
from . import email_templates
from .email_service import (
    ResendClient,
    ResendResult,
    EmailDispatcher,
    BackgroundEmailQueue,
    EmailLogService,
)
from .notification_fanout import (
    Actor,
    NotificationEvent,
    PlannedNotification,
    FanoutResult,
    RecipientResolver,
    NotificationFanout,
)
from .notification_service import NotificationService
from .workflow_service import StageWorkflowService, parse_stage
from .activity_service import ActivityService
from .organization_service import OrganizationService, UserService
from .position_service import PositionService
from .candidate_service import CandidateService
from .manatal_service import ManatalClient
from .storage_service import SupabaseStorageClient
from .import_service import ImportService, build_summary

__all__ = [
    "email_templates",
    "ResendClient",
    "ResendResult",
    "EmailDispatcher",
    "BackgroundEmailQueue",
    "EmailLogService",
    "Actor",
    "NotificationEvent",
    "PlannedNotification",
    "FanoutResult",
    "RecipientResolver",
    "NotificationFanout",
    "NotificationService",
    "StageWorkflowService",
    "parse_stage",
    "ActivityService",
    "OrganizationService",
    "UserService",
    "PositionService",
    "CandidateService",
    "ManatalClient",
    "SupabaseStorageClient",
    "ImportService",
    "build_summary",
]

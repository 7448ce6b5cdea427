"""
Enums for the S.T.A.R.S backend.
"""
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    CLIENT = "client"


class PositionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class Stage(str, Enum):
    """Pipeline stage of a candidate on a position."""
    SUBMITTED = "submitted"
    TO_INTERVIEW = "to_interview"
    APPROVED = "approved"
    REJECTED = "rejected"


class ActivityAction(str, Enum):
    ASSIGNED = "assigned"
    STAGE_CHANGE = "stage_change"
    COMMENT = "comment"


class NotificationType(str, Enum):
    STAGE_CHANGE = "stage_change"
    NEW_COMMENT = "new_comment"
    CLIENT_LOGIN = "client_login"
    CANDIDATE_ASSIGNED = "candidate_assigned"


class EmailStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"

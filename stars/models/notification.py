"""
In-app notification and email models.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from .common import CamelModel
from .enums import NotificationType, EmailStatus


class NotificationFilter(str, Enum):
    """Filters accepted by the notification feed."""
    UNREAD = "unread"
    STAGE_CHANGE = "stage_change"
    NEW_COMMENT = "new_comment"
    CLIENT_LOGIN = "client_login"
    CANDIDATE_ASSIGNED = "candidate_assigned"


class NotificationResponse(CamelModel):
    id: str
    type: NotificationType
    message: str
    is_read: bool
    user_id: str
    related_candidate_position_id: Optional[str] = None
    created_at: datetime


class UnreadCountResponse(CamelModel):
    user_id: str
    unread: int


class MarkAllReadResponse(CamelModel):
    user_id: str
    updated: int


class LoginDigestRequest(CamelModel):
    since: datetime


class LoginDigestResponse(CamelModel):
    logins: int
    emails_queued: int


class EmailJob(CamelModel):
    """One queued notification email."""
    to: str
    subject: str
    html: str
    template_name: str
    related_event_type: str
    related_candidate_position_id: Optional[str] = None


class EmailLogResponse(CamelModel):
    id: str
    to: str
    subject: str
    template_name: str
    related_event_type: str
    related_candidate_position_id: Optional[str] = None
    sent_at: datetime
    status: EmailStatus
    error: Optional[str] = None
    provider_message_id: Optional[str] = None

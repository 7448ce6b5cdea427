"""
Notification fan-out.

Given a pipeline event and the acting user's role, decide who hears about it
(the opposite role, scoped to the position's organization where relevant),
create one in-app notification per recipient and build one email job per
recipient. Emails are returned to the caller, which queues them once all
store writes for the triggering operation are done.

Routing:

    event               actor   recipients
    candidate_assigned  admin   active clients of the position's org, minus the actor
    stage_change        client  all active admins
    stage_change        admin   active clients of the org (+ other admins on approved)
    new_comment         client  all active admins
    new_comment         admin   active clients of the org
    client_login        client  all active admins
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional

from stars.config import APP_URL
from stars.models import EmailJob, NotificationType, Stage, UserRole
from stars.repositories import PipelineStore
from stars.services import email_templates as templates
from stars.services.email_templates import stage_label
from stars.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class Actor:
    """The user who triggered an event."""
    id: uuid.UUID
    name: str
    role: UserRole


@dataclass
class NotificationEvent:
    """Everything the fan-out needs to address and word one event."""
    type: NotificationType
    actor: Actor
    candidate_position_id: Optional[uuid.UUID] = None
    candidate_id: Optional[uuid.UUID] = None
    candidate_name: Optional[str] = None
    candidate_current_role: Optional[str] = None
    position_id: Optional[uuid.UUID] = None
    position_title: Optional[str] = None
    org_id: Optional[uuid.UUID] = None
    org_name: Optional[str] = None
    from_stage: Optional[str] = None
    to_stage: Optional[str] = None
    comment_body: Optional[str] = None
    occurred_at: Optional[datetime] = None


@dataclass
class PlannedNotification:
    """One recipient's in-app notification plus the email that goes with it."""
    recipient_id: uuid.UUID
    type: NotificationType
    message: str
    related_candidate_position_id: Optional[uuid.UUID]
    email: EmailJob


@dataclass
class FanoutResult:
    planned: List[PlannedNotification] = field(default_factory=list)
    created: int = 0
    failed: int = 0

    @property
    def email_jobs(self) -> List[EmailJob]:
        return [p.email for p in self.planned]


class RecipientResolver:
    """Looks up notification audiences. Inactive users are never returned."""

    def __init__(self, store: PipelineStore):
        self.store = store

    async def admins_of(self, org_id: Optional[uuid.UUID] = None) -> List[Mapping[str, Any]]:
        # Admins are platform-wide; org_id is accepted for symmetry with clients_of.
        return list(await self.store.users.list_admins(active_only=True))

    async def clients_of(self, org_id: Optional[uuid.UUID]) -> List[Mapping[str, Any]]:
        if org_id is None:
            return []
        return list(await self.store.users.list_by_org(org_id, active_only=True))


def _exclude(users: Iterable[Mapping[str, Any]], excluded_id: uuid.UUID) -> List[Mapping[str, Any]]:
    """Drop the excluded user and any duplicates, keeping first occurrence order."""
    seen = set()
    result = []
    for user in users:
        if user["id"] == excluded_id or user["id"] in seen:
            continue
        seen.add(user["id"])
        result.append(user)
    return result


class NotificationFanout:
    """Plans and writes notifications for pipeline events."""

    def __init__(
        self,
        store: PipelineStore,
        resolver: Optional[RecipientResolver] = None,
        app_url: str = APP_URL,
        now: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.resolver = resolver or RecipientResolver(store)
        self.app_url = app_url.rstrip("/")
        self.now = now

    # ------------------------------------------------------------------
    # Audience
    # ------------------------------------------------------------------

    async def resolve_recipients(self, event: NotificationEvent) -> List[Mapping[str, Any]]:
        actor = event.actor
        recipients: List[Mapping[str, Any]] = []

        if event.type == NotificationType.CANDIDATE_ASSIGNED:
            recipients = await self.resolver.clients_of(event.org_id)

        elif event.type == NotificationType.STAGE_CHANGE:
            if actor.role == UserRole.CLIENT:
                recipients = await self.resolver.admins_of()
            else:
                recipients = await self.resolver.clients_of(event.org_id)
                if event.to_stage == Stage.APPROVED.value:
                    recipients += await self.resolver.admins_of()

        elif event.type == NotificationType.NEW_COMMENT:
            if actor.role == UserRole.CLIENT:
                recipients = await self.resolver.admins_of()
            else:
                recipients = await self.resolver.clients_of(event.org_id)

        elif event.type == NotificationType.CLIENT_LOGIN:
            if actor.role == UserRole.CLIENT:
                recipients = await self.resolver.admins_of()

        return _exclude(recipients, actor.id)

    # ------------------------------------------------------------------
    # Wording
    # ------------------------------------------------------------------

    def plan(
        self,
        event: NotificationEvent,
        recipients: Iterable[Mapping[str, Any]],
    ) -> List[PlannedNotification]:
        """Build the notification + email for each recipient. No I/O."""
        message = self.message_for(event)
        related_id = event.candidate_position_id
        planned = []
        for recipient in recipients:
            template_name, subject, html = self._render_email(event, recipient)
            planned.append(PlannedNotification(
                recipient_id=recipient["id"],
                type=event.type,
                message=message,
                related_candidate_position_id=related_id,
                email=EmailJob(
                    to=recipient["email"],
                    subject=subject,
                    html=html,
                    template_name=template_name,
                    related_event_type=event.type.value,
                    related_candidate_position_id=str(related_id) if related_id else None,
                ),
            ))
        return planned

    @staticmethod
    def message_for(event: NotificationEvent) -> str:
        """In-app notification text for an event."""
        candidate = event.candidate_name or "a candidate"
        actor = event.actor

        if event.type == NotificationType.STAGE_CHANGE:
            return (
                f"{actor.name} moved {candidate} from "
                f"{stage_label(event.from_stage)} to {stage_label(event.to_stage)}"
            )
        if event.type == NotificationType.CANDIDATE_ASSIGNED:
            return f"{candidate} was added to {event.position_title or 'Unknown'}"
        if event.type == NotificationType.NEW_COMMENT:
            if actor.role == UserRole.CLIENT:
                return f"{actor.name} commented on {candidate}"
            return f"Nimble left a note on {candidate}"
        if event.type == NotificationType.CLIENT_LOGIN:
            return f"{actor.name} from {event.org_name or 'Unknown'} logged in"
        raise ValueError(f"Unknown notification type: {event.type}")

    def _profile_url(self, event: NotificationEvent, recipient: Mapping[str, Any]) -> str:
        if recipient["role"] == UserRole.ADMIN.value:
            return f"{self.app_url}/admin/candidates/{event.candidate_id}"
        return f"{self.app_url}/positions/{event.position_id}/candidates/{event.candidate_id}"

    def _render_email(self, event: NotificationEvent, recipient: Mapping[str, Any]) -> tuple[str, str, str]:
        """Return (template_name, subject, html) for one recipient."""
        candidate = event.candidate_name or "a candidate"
        title = event.position_title or "Unknown"
        org_name = event.org_name or "Unknown"

        if event.type == NotificationType.CLIENT_LOGIN:
            return (
                "client-login",
                f"Client Login: {event.actor.name} ({org_name})",
                templates.client_login_html(
                    user_name=event.actor.name,
                    org_name=org_name,
                    login_time=event.occurred_at or self.now(),
                    client_detail_url=f"{self.app_url}/admin/clients/{event.org_id}",
                ),
            )

        profile_url = self._profile_url(event, recipient)

        if event.type == NotificationType.CANDIDATE_ASSIGNED:
            return (
                "candidate-assigned",
                f"New Candidate: {candidate} for {title}",
                templates.candidate_assigned_html(
                    candidate_name=candidate,
                    position_title=title,
                    org_name=org_name,
                    profile_url=profile_url,
                    current_role=event.candidate_current_role,
                ),
            )

        if event.type == NotificationType.STAGE_CHANGE:
            return self._render_stage_change(event, candidate, title, org_name, profile_url)

        if event.type == NotificationType.NEW_COMMENT:
            body = event.comment_body or ""
            if event.actor.role == UserRole.CLIENT:
                return (
                    "new-comment",
                    f"New Comment on {candidate}",
                    templates.new_comment_html(
                        actor_name=event.actor.name,
                        candidate_name=candidate,
                        position_title=title,
                        comment=body,
                        profile_url=profile_url,
                    ),
                )
            return (
                "admin-comment",
                f"Note from Nimble on {candidate}",
                templates.admin_comment_html(
                    candidate_name=candidate,
                    position_title=title,
                    comment=body,
                    profile_url=profile_url,
                ),
            )

        raise ValueError(f"Unknown notification type: {event.type}")

    @staticmethod
    def _render_stage_change(
        event: NotificationEvent,
        candidate: str,
        title: str,
        org_name: str,
        profile_url: str,
    ) -> tuple[str, str, str]:
        to_stage = event.to_stage

        if to_stage == Stage.TO_INTERVIEW.value:
            return (
                "workflow-to-interview",
                f"Interview Stage: {candidate}",
                templates.workflow_to_interview_html(candidate, title, org_name, profile_url),
            )
        if to_stage == Stage.APPROVED.value:
            return (
                "workflow-approved",
                f"Candidate Approved: {candidate}",
                templates.workflow_approved_html(candidate, title, org_name, profile_url),
            )
        if to_stage == Stage.REJECTED.value:
            return (
                "workflow-rejected",
                f"Candidate Rejected: {candidate}",
                templates.workflow_rejected_html(
                    candidate, title, event.actor.name, org_name, profile_url
                ),
            )
        return (
            "stage-change",
            f"{candidate} moved to {stage_label(to_stage)}",
            templates.stage_change_html(
                actor_name=event.actor.name,
                candidate_name=candidate,
                from_stage=event.from_stage,
                to_stage=to_stage,
                position_title=title,
                org_name=org_name,
                profile_url=profile_url,
            ),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def dispatch(self, event: NotificationEvent) -> FanoutResult:
        """
        Resolve recipients, insert one unread notification each, and return
        the planned emails. A failed insert for one recipient is logged and
        does not stop the others.
        """
        recipients = await self.resolve_recipients(event)
        result = FanoutResult(planned=self.plan(event, recipients))
        created_at = event.occurred_at or self.now()

        for planned in result.planned:
            try:
                await self.store.notifications.create(
                    type=planned.type.value,
                    message=planned.message,
                    user_id=planned.recipient_id,
                    related_candidate_position_id=planned.related_candidate_position_id,
                    at=created_at,
                )
                result.created += 1
            except Exception as e:
                result.failed += 1
                logger.error(
                    f"Failed to create {event.type.value} notification for user "
                    f"{planned.recipient_id}: {e}"
                )

        logger.info(
            f"Fan-out {event.type.value}: {result.created} notification(s), "
            f"{len(result.planned)} email(s) planned"
        )
        return result

"""
Notification service - the in-app notification feed and the login digest.
"""
import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional

from stars.config import APP_URL
from stars.exceptions import NotFoundError
from stars.models import (
    EmailJob,
    LoginDigestResponse,
    NotificationFilter,
    NotificationResponse,
    NotificationType,
)
from stars.repositories import PipelineStore
from stars.services.email_templates import login_digest_html
from stars.utils import utc_now

logger = logging.getLogger(__name__)


class NotificationService:
    """Read and acknowledge notifications for a user."""

    def __init__(
        self,
        store: PipelineStore,
        email_queue=None,
        now: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.email_queue = email_queue
        self.now = now

    async def list_unread(self, user_id: uuid.UUID) -> List[NotificationResponse]:
        rows = await self.store.notifications.list_unread(user_id)
        return [self._row_to_response(row) for row in rows]

    async def list_recent(self, user_id: uuid.UUID, limit: int = 20) -> List[NotificationResponse]:
        rows = await self.store.notifications.list_for_user(user_id, limit=limit)
        return [self._row_to_response(row) for row in rows]

    async def count_unread(self, user_id: uuid.UUID) -> int:
        return await self.store.notifications.count_unread(user_id)

    async def list_filtered(
        self,
        user_id: uuid.UUID,
        filter: Optional[NotificationFilter] = None,
        limit: int = 50,
    ) -> List[NotificationResponse]:
        """
        List notifications with an optional filter.

        ``unread`` limits to unread rows; any other filter value is a
        notification type. No filter returns the most recent rows.
        """
        if filter == NotificationFilter.UNREAD:
            rows = await self.store.notifications.list_for_user(user_id, limit=limit, unread_only=True)
        elif filter is not None:
            rows = await self.store.notifications.list_for_user(user_id, limit=limit, type=filter.value)
        else:
            rows = await self.store.notifications.list_for_user(user_id, limit=limit)
        return [self._row_to_response(row) for row in rows]

    async def mark_as_read(
        self,
        notification_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None,
    ) -> NotificationResponse:
        """
        Mark one notification read. Marking an already-read one is a no-op.

        With ``user_id``, someone else's notification is reported as not found.
        """
        if user_id is not None:
            existing = await self.store.notifications.get_by_id(notification_id)
            if not existing or existing["user_id"] != user_id:
                raise NotFoundError("Notification", str(notification_id))

        row = await self.store.notifications.mark_as_read(notification_id)
        if not row:
            raise NotFoundError("Notification", str(notification_id))
        return self._row_to_response(row)

    async def mark_all_as_read(self, user_id: uuid.UUID) -> int:
        updated = await self.store.notifications.mark_all_as_read(user_id)
        logger.info(f"Marked {updated} notification(s) read for user {user_id}")
        return updated

    async def send_login_digest(self, since: datetime) -> LoginDigestResponse:
        """
        Email every active admin a summary of client logins since ``since``.

        Nothing is sent when there were no logins.
        """
        logins = [dict(row) for row in await self.store.users.list_client_logins_since(since)]
        if not logins:
            logger.info(f"No client logins since {since.isoformat()}, skipping digest")
            return LoginDigestResponse(logins=0, emails_queued=0)

        admins = await self.store.users.list_admins(active_only=True)
        html = login_digest_html(logins, since, f"{APP_URL}/admin/clients")
        subject = f"Client Login Digest: {len(logins)} login{'s' if len(logins) != 1 else ''}"
        jobs = [
            EmailJob(
                to=admin["email"],
                subject=subject,
                html=html,
                template_name="login-digest",
                related_event_type=NotificationType.CLIENT_LOGIN.value,
            )
            for admin in admins
        ]

        queued = self.email_queue.enqueue(jobs) if self.email_queue and jobs else 0
        return LoginDigestResponse(logins=len(logins), emails_queued=queued)

    @staticmethod
    def _row_to_response(row) -> NotificationResponse:
        return NotificationResponse(
            id=str(row["id"]),
            type=row["type"],
            message=row["message"],
            is_read=row["is_read"],
            user_id=str(row["user_id"]),
            related_candidate_position_id=(
                str(row["related_candidate_position_id"])
                if row["related_candidate_position_id"] else None
            ),
            created_at=row["created_at"],
        )

"""
Notification repository - per-user in-app notifications.
"""
import asyncpg
import uuid
from typing import Optional, List
from datetime import datetime


class NotificationRepository:
    """Repository for in-app notification database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(
        self,
        type: str,
        message: str,
        user_id: uuid.UUID,
        related_candidate_position_id: Optional[uuid.UUID],
        at: datetime,
    ) -> asyncpg.Record:
        """Create an unread notification."""
        return await self.pool.fetchrow(
            """
            INSERT INTO notifications (type, message, is_read, user_id, related_candidate_position_id, created_at)
            VALUES ($1, $2, false, $3, $4, $5)
            RETURNING *
            """,
            type, message, user_id, related_candidate_position_id, at
        )

    async def get_by_id(self, notification_id: uuid.UUID) -> Optional[asyncpg.Record]:
        return await self.pool.fetchrow(
            "SELECT * FROM notifications WHERE id = $1",
            notification_id
        )

    async def list_unread(self, user_id: uuid.UUID) -> List[asyncpg.Record]:
        """All unread notifications of a user, newest first."""
        return await self.pool.fetch(
            """
            SELECT * FROM notifications
            WHERE user_id = $1 AND is_read = false
            ORDER BY created_at DESC
            """,
            user_id
        )

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        limit: int = 20,
        unread_only: bool = False,
        type: Optional[str] = None,
    ) -> List[asyncpg.Record]:
        """
        List a user's notifications, newest first.

        Args:
            user_id: Recipient
            limit: Maximum rows returned
            unread_only: Only rows with is_read = false
            type: Only rows of this notification type
        """
        conditions = ["user_id = $1"]
        params = [user_id]
        param_idx = 2

        if unread_only:
            conditions.append("is_read = false")

        if type:
            conditions.append(f"type = ${param_idx}")
            params.append(type)
            param_idx += 1

        where_clause = " AND ".join(conditions)
        params.append(limit)

        return await self.pool.fetch(
            f"""
            SELECT * FROM notifications
            WHERE {where_clause}
            ORDER BY created_at DESC
            LIMIT ${param_idx}
            """,
            *params
        )

    async def count_unread(self, user_id: uuid.UUID) -> int:
        return await self.pool.fetchval(
            "SELECT COUNT(*) FROM notifications WHERE user_id = $1 AND is_read = false",
            user_id
        )

    async def mark_as_read(self, notification_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Mark one notification read. Returns None if it does not exist."""
        return await self.pool.fetchrow(
            "UPDATE notifications SET is_read = true WHERE id = $1 RETURNING *",
            notification_id
        )

    async def mark_all_as_read(self, user_id: uuid.UUID) -> int:
        """Mark every unread notification of a user read and return how many changed."""
        rows = await self.pool.fetch(
            """
            UPDATE notifications SET is_read = true
            WHERE user_id = $1 AND is_read = false
            RETURNING id
            """,
            user_id
        )
        return len(rows)

"""
Activity repository - the append-only audit log of pipeline actions.
"""
import asyncpg
import uuid
from typing import Optional, List
from datetime import datetime


class ActivityLogRepository:
    """Repository for activity log database operations. Entries are never updated."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(
        self,
        action: str,
        user_id: uuid.UUID,
        user_name: str,
        candidate_position_id: uuid.UUID,
        at: datetime,
        from_stage: Optional[str] = None,
        to_stage: Optional[str] = None,
    ) -> asyncpg.Record:
        """Append an activity log entry."""
        return await self.pool.fetchrow(
            """
            INSERT INTO activity_log
            (action, from_stage, to_stage, user_id, user_name, candidate_position_id, created_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING *
            """,
            action,
            from_stage,
            to_stage,
            user_id,
            user_name,
            candidate_position_id,
            at
        )

    async def list_for_candidate_position(
        self,
        candidate_position_id: uuid.UUID,
        limit: int = 50
    ) -> List[asyncpg.Record]:
        """Timeline of one candidate position, newest first."""
        return await self.pool.fetch(
            """
            SELECT id, action, from_stage, to_stage, user_id, user_name,
                   candidate_position_id, created_at
            FROM activity_log
            WHERE candidate_position_id = $1
            ORDER BY created_at DESC
            LIMIT $2
            """,
            candidate_position_id, limit
        )

    async def list_recent(self, limit: int = 10) -> List[asyncpg.Record]:
        """Most recent activity across the whole pipeline."""
        return await self.pool.fetch(
            """
            SELECT id, action, from_stage, to_stage, user_id, user_name,
                   candidate_position_id, created_at
            FROM activity_log
            ORDER BY created_at DESC
            LIMIT $1
            """,
            limit
        )

"""
Comment repository - discussion threads on a candidate position.
"""
import asyncpg
import uuid
from typing import List
from datetime import datetime


class CommentRepository:
    """Repository for comment database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(
        self,
        body: str,
        user_id: uuid.UUID,
        candidate_position_id: uuid.UUID,
        at: datetime,
    ) -> asyncpg.Record:
        """Create a comment."""
        return await self.pool.fetchrow(
            """
            INSERT INTO comments (body, user_id, candidate_position_id, created_at)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            body, user_id, candidate_position_id, at
        )

    async def list_by_candidate_position(self, candidate_position_id: uuid.UUID) -> List[asyncpg.Record]:
        """List comments with their author's name, newest first."""
        return await self.pool.fetch(
            """
            SELECT cm.*, u.name AS user_name
            FROM comments cm
            JOIN users u ON u.id = cm.user_id
            WHERE cm.candidate_position_id = $1
            ORDER BY cm.created_at DESC
            """,
            candidate_position_id
        )

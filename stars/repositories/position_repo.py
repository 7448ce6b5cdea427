"""
Position repository - handles position database operations.
"""
import asyncpg
import uuid
from typing import Optional, List


class PositionRepository:
    """Repository for position database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_by_id(self, position_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Get a position by ID."""
        return await self.pool.fetchrow(
            "SELECT * FROM positions WHERE id = $1",
            position_id
        )

    async def list_by_org(self, org_id: uuid.UUID) -> List[asyncpg.Record]:
        """List positions of an organization, newest first."""
        return await self.pool.fetch(
            "SELECT * FROM positions WHERE org_id = $1 ORDER BY created_at DESC",
            org_id
        )

    async def create(
        self,
        title: str,
        org_id: uuid.UUID,
        description: Optional[str] = None,
        status: str = "open",
    ) -> asyncpg.Record:
        """Create a new position."""
        return await self.pool.fetchrow(
            """
            INSERT INTO positions (title, description, status, org_id)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            title, description, status, org_id
        )

    async def set_status(self, position_id: uuid.UUID, status: str) -> Optional[asyncpg.Record]:
        """Open or close a position."""
        return await self.pool.fetchrow(
            "UPDATE positions SET status = $2 WHERE id = $1 RETURNING *",
            position_id, status
        )

    async def count_open(self) -> int:
        """Count open positions across all organizations."""
        return await self.pool.fetchval(
            "SELECT COUNT(*) FROM positions WHERE status = 'open'"
        )

"""
Organization repository - handles client organization database operations.
"""
import asyncpg
import uuid
from typing import Optional, List


class OrganizationRepository:
    """Repository for organization database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_by_id(self, org_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Get an organization by ID."""
        return await self.pool.fetchrow(
            "SELECT * FROM organizations WHERE id = $1",
            org_id
        )

    async def list_all(self) -> List[asyncpg.Record]:
        """List all organizations, alphabetically."""
        return await self.pool.fetch(
            "SELECT * FROM organizations ORDER BY name"
        )

    async def create(
        self,
        name: str,
        logo_url: Optional[str] = None,
        primary_color: Optional[str] = None,
    ) -> asyncpg.Record:
        """Create a new organization."""
        return await self.pool.fetchrow(
            """
            INSERT INTO organizations (name, logo_url, primary_color)
            VALUES ($1, $2, $3)
            RETURNING *
            """,
            name, logo_url, primary_color
        )

    async def update_branding(
        self,
        org_id: uuid.UUID,
        logo_url: Optional[str] = None,
        primary_color: Optional[str] = None,
    ) -> Optional[asyncpg.Record]:
        """Update logo and/or primary color. Fields left as None are kept."""
        return await self.pool.fetchrow(
            """
            UPDATE organizations
            SET logo_url = COALESCE($2, logo_url),
                primary_color = COALESCE($3, primary_color)
            WHERE id = $1
            RETURNING *
            """,
            org_id, logo_url, primary_color
        )

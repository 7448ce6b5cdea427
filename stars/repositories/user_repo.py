"""
User repository - handles admin and client user database operations.
"""
import asyncpg
import uuid
from typing import Optional, List
from datetime import datetime


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Get a user by ID."""
        return await self.pool.fetchrow(
            "SELECT * FROM users WHERE id = $1",
            user_id
        )

    async def get_by_supabase_id(self, supabase_user_id: str) -> Optional[asyncpg.Record]:
        """Get a user by Supabase auth user ID."""
        return await self.pool.fetchrow(
            "SELECT * FROM users WHERE supabase_user_id = $1",
            supabase_user_id
        )

    async def get_by_email(self, email: str) -> Optional[asyncpg.Record]:
        """Get a user by email."""
        return await self.pool.fetchrow(
            "SELECT * FROM users WHERE lower(email) = lower($1) LIMIT 1",
            email
        )

    async def list_by_org(self, org_id: uuid.UUID, active_only: bool = False) -> List[asyncpg.Record]:
        """List the client users of an organization."""
        if active_only:
            return await self.pool.fetch(
                "SELECT * FROM users WHERE org_id = $1 AND is_active = true ORDER BY name",
                org_id
            )
        return await self.pool.fetch(
            "SELECT * FROM users WHERE org_id = $1 ORDER BY name",
            org_id
        )

    async def list_admins(self, active_only: bool = True) -> List[asyncpg.Record]:
        """List admin users."""
        if active_only:
            return await self.pool.fetch(
                "SELECT * FROM users WHERE role = 'admin' AND is_active = true ORDER BY name"
            )
        return await self.pool.fetch(
            "SELECT * FROM users WHERE role = 'admin' ORDER BY name"
        )

    async def create(
        self,
        email: str,
        name: str,
        role: str,
        org_id: Optional[uuid.UUID] = None,
        supabase_user_id: Optional[str] = None,
    ) -> asyncpg.Record:
        """Create a new user."""
        return await self.pool.fetchrow(
            """
            INSERT INTO users (email, name, role, org_id, supabase_user_id)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING *
            """,
            email, name, role, org_id, supabase_user_id
        )

    async def set_active(self, user_id: uuid.UUID, is_active: bool) -> Optional[asyncpg.Record]:
        """Activate or deactivate a user."""
        return await self.pool.fetchrow(
            "UPDATE users SET is_active = $2 WHERE id = $1 RETURNING *",
            user_id, is_active
        )

    async def record_login(self, user_id: uuid.UUID, at: datetime) -> Optional[asyncpg.Record]:
        """
        Set last_login_at and return the user with the value it replaced.

        The previous value is read under a row lock in the same statement,
        so two concurrent logins cannot both observe the old timestamp.

        Returns:
            Row with the user's columns plus ``previous_login_at``,
            or None if the user does not exist.
        """
        return await self.pool.fetchrow(
            """
            UPDATE users u
            SET last_login_at = $2
            FROM (
                SELECT id, last_login_at AS previous_login_at
                FROM users
                WHERE id = $1
                FOR UPDATE
            ) prev
            WHERE u.id = prev.id
            RETURNING u.id, u.email, u.name, u.role, u.org_id, u.is_active,
                      u.last_login_at, prev.previous_login_at
            """,
            user_id, at
        )

    async def list_client_logins_since(self, since: datetime) -> List[asyncpg.Record]:
        """List client users who logged in at or after ``since``, newest first."""
        return await self.pool.fetch(
            """
            SELECT u.id, u.name, u.email, u.org_id, u.last_login_at,
                   o.name AS org_name
            FROM users u
            LEFT JOIN organizations o ON o.id = u.org_id
            WHERE u.role = 'client' AND u.last_login_at >= $1
            ORDER BY u.last_login_at DESC
            """,
            since
        )

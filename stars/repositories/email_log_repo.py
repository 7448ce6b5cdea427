"""
Email log repository - one row per attempted notification email.
"""
import asyncpg
import uuid
from typing import Optional, List
from datetime import datetime


class EmailLogRepository:
    """Repository for email delivery log operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create(
        self,
        to: str,
        subject: str,
        template_name: str,
        related_event_type: str,
        related_candidate_position_id: Optional[uuid.UUID],
        sent_at: datetime,
        status: str,
        error: Optional[str] = None,
        provider_message_id: Optional[str] = None,
    ) -> asyncpg.Record:
        """Record the outcome of a send attempt."""
        return await self.pool.fetchrow(
            """
            INSERT INTO email_log
            ("to", subject, template_name, related_event_type, related_candidate_position_id,
             sent_at, status, error, provider_message_id)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING *
            """,
            to,
            subject,
            template_name,
            related_event_type,
            related_candidate_position_id,
            sent_at,
            status,
            error,
            provider_message_id
        )

    async def list_entries(
        self,
        related_event_type: Optional[str] = None,
        related_candidate_position_id: Optional[uuid.UUID] = None,
        limit: int = 50,
    ) -> List[asyncpg.Record]:
        """List log entries, newest first, optionally filtered by event and pipeline row."""
        conditions = []
        params = []
        param_idx = 1

        if related_event_type:
            conditions.append(f"related_event_type = ${param_idx}")
            params.append(related_event_type)
            param_idx += 1

        if related_candidate_position_id:
            conditions.append(f"related_candidate_position_id = ${param_idx}")
            params.append(related_candidate_position_id)
            param_idx += 1

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)

        return await self.pool.fetch(
            f"""
            SELECT * FROM email_log
            {where_clause}
            ORDER BY sent_at DESC
            LIMIT ${param_idx}
            """,
            *params
        )

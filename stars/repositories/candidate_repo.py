"""
Candidate repository - handles candidate and candidate file database operations.
"""
import asyncpg
import uuid
from typing import Optional, List
from datetime import datetime


class CandidateRepository:
    """Repository for candidate database operations."""

    # Columns a caller may change through update()
    UPDATABLE_FIELDS = (
        "full_name",
        "email",
        "phone",
        "current_role",
        "current_company",
        "summary",
    )

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_by_id(self, candidate_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Get a candidate by ID."""
        return await self.pool.fetchrow(
            "SELECT * FROM candidates WHERE id = $1",
            candidate_id
        )

    async def get_by_manatal_id(self, manatal_id: int) -> Optional[asyncpg.Record]:
        """Get a candidate previously imported from Manatal."""
        return await self.pool.fetchrow(
            "SELECT * FROM candidates WHERE manatal_id = $1",
            manatal_id
        )

    async def create(
        self,
        full_name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        current_role: Optional[str] = None,
        current_company: Optional[str] = None,
        summary: Optional[str] = None,
        external_ref: Optional[str] = None,
        manatal_id: Optional[int] = None,
        manatal_url: Optional[str] = None,
        manatal_imported_at: Optional[datetime] = None,
    ) -> asyncpg.Record:
        """Create a new candidate."""
        return await self.pool.fetchrow(
            """
            INSERT INTO candidates (
                full_name, email, phone, "current_role", current_company, summary,
                external_ref, manatal_id, manatal_url, manatal_imported_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING *
            """,
            full_name, email, phone, current_role, current_company, summary,
            external_ref, manatal_id, manatal_url, manatal_imported_at
        )

    async def update(self, candidate_id: uuid.UUID, **fields) -> Optional[asyncpg.Record]:
        """Update candidate information. Only non-None known fields are written."""
        updates = []
        params = []
        param_idx = 1

        for name in self.UPDATABLE_FIELDS:
            value = fields.get(name)
            if value is not None:
                updates.append(f'"{name}" = ${param_idx}')
                params.append(value)
                param_idx += 1

        if not updates:
            return await self.get_by_id(candidate_id)

        params.append(candidate_id)
        return await self.pool.fetchrow(
            f"UPDATE candidates SET {', '.join(updates)}, updated_at = NOW() "
            f"WHERE id = ${param_idx} RETURNING *",
            *params
        )

    async def list_with_position_counts(self, search: Optional[str] = None) -> List[asyncpg.Record]:
        """
        List candidates with the number of positions each is assigned to.

        ``search`` matches name, current role or current company, case-insensitively.
        """
        conditions = []
        params = []

        if search:
            conditions.append(
                "(c.full_name ILIKE $1 OR c.\"current_role\" ILIKE $1 OR c.current_company ILIKE $1)"
            )
            params.append(f"%{search}%")

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        return await self.pool.fetch(
            f"""
            SELECT c.*,
                   (SELECT COUNT(*) FROM candidate_positions cp WHERE cp.candidate_id = c.id) AS position_count
            FROM candidates c
            {where_clause}
            ORDER BY c.created_at DESC
            """,
            *params
        )


class CandidateFileRepository:
    """Repository for candidate file (resume, attachments) records."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def list_by_candidate(self, candidate_id: uuid.UUID) -> List[asyncpg.Record]:
        return await self.pool.fetch(
            "SELECT * FROM candidate_files WHERE candidate_id = $1 ORDER BY uploaded_at DESC",
            candidate_id
        )

    async def create(
        self,
        candidate_id: uuid.UUID,
        file_url: str,
        file_name: str,
        file_type: str,
    ) -> asyncpg.Record:
        return await self.pool.fetchrow(
            """
            INSERT INTO candidate_files (candidate_id, file_url, file_name, file_type)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            candidate_id, file_url, file_name, file_type
        )

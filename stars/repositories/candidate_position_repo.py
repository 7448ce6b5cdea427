"""
Candidate position repository - the pipeline join between candidates and positions.
"""
import asyncpg
import uuid
from typing import Optional, List
from datetime import datetime


class CandidatePositionRepository:
    """Repository for candidate_positions (pipeline rows) database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get_by_id(self, candidate_position_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Get a pipeline row by ID."""
        return await self.pool.fetchrow(
            "SELECT * FROM candidate_positions WHERE id = $1",
            candidate_position_id
        )

    async def get_by_pair(self, position_id: uuid.UUID, candidate_id: uuid.UUID) -> Optional[asyncpg.Record]:
        """Get the pipeline row for a (position, candidate) pair."""
        return await self.pool.fetchrow(
            "SELECT * FROM candidate_positions WHERE position_id = $1 AND candidate_id = $2",
            position_id, candidate_id
        )

    async def create(
        self,
        candidate_id: uuid.UUID,
        position_id: uuid.UUID,
        stage: str,
        at: datetime,
    ) -> asyncpg.Record:
        """
        Create a pipeline row with all timestamps set to ``at``.

        Raises:
            asyncpg.UniqueViolationError: If the pair already exists.
        """
        return await self.pool.fetchrow(
            """
            INSERT INTO candidate_positions
            (candidate_id, position_id, stage, created_at, updated_at, last_interaction_at)
            VALUES ($1, $2, $3, $4, $4, $4)
            RETURNING *
            """,
            candidate_id, position_id, stage, at
        )

    async def update_stage(
        self,
        candidate_position_id: uuid.UUID,
        stage: str,
        at: datetime,
    ) -> Optional[asyncpg.Record]:
        """Set the stage and bump updated_at / last_interaction_at."""
        return await self.pool.fetchrow(
            """
            UPDATE candidate_positions
            SET stage = $2,
                updated_at = GREATEST(updated_at, $3),
                last_interaction_at = GREATEST(last_interaction_at, $3)
            WHERE id = $1
            RETURNING *
            """,
            candidate_position_id, stage, at
        )

    async def touch(self, candidate_position_id: uuid.UUID, at: datetime) -> Optional[asyncpg.Record]:
        """Record an interaction (e.g. a comment) without changing the stage."""
        return await self.pool.fetchrow(
            """
            UPDATE candidate_positions
            SET updated_at = GREATEST(updated_at, $2),
                last_interaction_at = GREATEST(last_interaction_at, $2)
            WHERE id = $1
            RETURNING *
            """,
            candidate_position_id, at
        )

    async def list_by_position(self, position_id: uuid.UUID) -> List[asyncpg.Record]:
        """List the pipeline of a position, most recently touched first."""
        return await self.pool.fetch(
            """
            SELECT cp.*, c.full_name AS candidate_name, p.title AS position_title
            FROM candidate_positions cp
            JOIN candidates c ON c.id = cp.candidate_id
            JOIN positions p ON p.id = cp.position_id
            WHERE cp.position_id = $1
            ORDER BY cp.last_interaction_at DESC
            """,
            position_id
        )

    async def list_by_candidate(self, candidate_id: uuid.UUID) -> List[asyncpg.Record]:
        """List every position a candidate is in."""
        return await self.pool.fetch(
            """
            SELECT cp.*, c.full_name AS candidate_name, p.title AS position_title
            FROM candidate_positions cp
            JOIN candidates c ON c.id = cp.candidate_id
            JOIN positions p ON p.id = cp.position_id
            WHERE cp.candidate_id = $1
            ORDER BY cp.created_at DESC
            """,
            candidate_id
        )

    async def list_by_stage(self, stage: str) -> List[asyncpg.Record]:
        """List pipeline rows currently at a stage."""
        return await self.pool.fetch(
            """
            SELECT cp.*, c.full_name AS candidate_name, p.title AS position_title
            FROM candidate_positions cp
            JOIN candidates c ON c.id = cp.candidate_id
            JOIN positions p ON p.id = cp.position_id
            WHERE cp.stage = $1
            ORDER BY cp.updated_at DESC
            """,
            stage
        )

    async def count_all(self) -> int:
        return await self.pool.fetchval("SELECT COUNT(*) FROM candidate_positions")

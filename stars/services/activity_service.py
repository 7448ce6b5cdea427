"""
Activity service - audit timeline retrieval.

Entries are written by the stage workflow; this service only reads them.
"""
from typing import Union
import uuid

from stars.exceptions import parse_uuid
from stars.models import ActivityLogEntryResponse
from stars.repositories import PipelineStore


class ActivityService:
    """Service for retrieving pipeline activity."""

    def __init__(self, store: PipelineStore):
        self.store = store

    async def get_timeline(
        self,
        candidate_position_id: Union[str, uuid.UUID],
        limit: int = 50
    ) -> list[ActivityLogEntryResponse]:
        """
        Get the activity timeline for one candidate position.

        Args:
            candidate_position_id: The candidate position's UUID
            limit: Max number of entries to return

        Returns:
            Entries, newest first
        """
        rows = await self.store.activity_log.list_for_candidate_position(
            parse_uuid(candidate_position_id, "candidate_position_id"),
            limit=limit
        )
        return [self._row_to_response(row) for row in rows]

    async def get_recent(self, limit: int = 10) -> list[ActivityLogEntryResponse]:
        """Most recent activity across all positions (dashboard feed)."""
        rows = await self.store.activity_log.list_recent(limit=limit)
        return [self._row_to_response(row) for row in rows]

    @staticmethod
    def _row_to_response(row) -> ActivityLogEntryResponse:
        return ActivityLogEntryResponse(
            id=str(row["id"]),
            action=row["action"],
            from_stage=row["from_stage"],
            to_stage=row["to_stage"],
            user_id=str(row["user_id"]),
            user_name=row["user_name"],
            candidate_position_id=str(row["candidate_position_id"]),
            created_at=row["created_at"],
        )

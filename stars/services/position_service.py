"""
Position service - open roles at client organizations.
"""
import uuid

from stars.exceptions import NotFoundError, parse_uuid
from stars.models import PositionCreate, PositionResponse, PositionStatus
from stars.repositories import PipelineStore


class PositionService:
    """Service for position operations."""

    def __init__(self, store: PipelineStore):
        self.store = store

    @staticmethod
    def build_response(row) -> PositionResponse:
        return PositionResponse(
            id=str(row["id"]),
            title=row["title"],
            description=row["description"],
            status=row["status"],
            org_id=str(row["org_id"]),
            created_at=row["created_at"],
        )

    async def create(self, data: PositionCreate) -> PositionResponse:
        org_uuid = parse_uuid(data.org_id, "org_id")
        if not await self.store.organizations.get_by_id(org_uuid):
            raise NotFoundError("Organization", str(org_uuid))

        row = await self.store.positions.create(
            title=data.title.strip(),
            org_id=org_uuid,
            description=data.description,
            status=data.status.value,
        )
        return self.build_response(row)

    async def get(self, position_id: uuid.UUID) -> PositionResponse:
        row = await self.store.positions.get_by_id(position_id)
        if not row:
            raise NotFoundError("Position", str(position_id))
        return self.build_response(row)

    async def list_by_org(self, org_id: uuid.UUID) -> list[PositionResponse]:
        rows = await self.store.positions.list_by_org(org_id)
        return [self.build_response(row) for row in rows]

    async def set_status(self, position_id: uuid.UUID, status: PositionStatus) -> PositionResponse:
        row = await self.store.positions.set_status(position_id, status.value)
        if not row:
            raise NotFoundError("Position", str(position_id))
        return self.build_response(row)

    async def count_open(self) -> int:
        return await self.store.positions.count_open()

"""
Candidate service - the shared candidate pool and their files.
"""
import logging
import uuid
from typing import Optional

import asyncpg

from stars.exceptions import ConflictError, NotFoundError, ValidationError
from stars.models import (
    CandidateCreate,
    CandidateUpdate,
    CandidateResponse,
    CandidateListResponse,
    CandidateDetailResponse,
    CandidateFileCreate,
    CandidateFileResponse,
)
from stars.repositories import PipelineStore

logger = logging.getLogger(__name__)


class CandidateService:
    """Service for candidate operations."""

    def __init__(self, store: PipelineStore):
        self.store = store

    @staticmethod
    def _candidate_fields(row) -> dict:
        return dict(
            id=str(row["id"]),
            full_name=row["full_name"],
            email=row["email"],
            phone=row["phone"],
            current_role=row["current_role"],
            current_company=row["current_company"],
            summary=row["summary"],
            external_ref=row["external_ref"],
            manatal_id=row["manatal_id"],
            manatal_url=row["manatal_url"],
            manatal_imported_at=row["manatal_imported_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @classmethod
    def build_response(cls, row) -> CandidateResponse:
        return CandidateResponse(**cls._candidate_fields(row))

    @staticmethod
    def build_file_response(row) -> CandidateFileResponse:
        return CandidateFileResponse(
            id=str(row["id"]),
            candidate_id=str(row["candidate_id"]),
            file_url=row["file_url"],
            file_name=row["file_name"],
            file_type=row["file_type"],
            uploaded_at=row["uploaded_at"],
        )

    async def create(self, data: CandidateCreate) -> CandidateResponse:
        full_name = data.full_name.strip()
        if not full_name:
            raise ValidationError("Candidate full name cannot be empty", field="full_name")

        try:
            row = await self.store.candidates.create(
                full_name=full_name,
                email=data.email,
                phone=data.phone,
                current_role=data.current_role,
                current_company=data.current_company,
                summary=data.summary,
                external_ref=data.external_ref,
            )
        except asyncpg.UniqueViolationError:
            raise ConflictError(
                "A candidate with this external reference already exists",
                details={"external_ref": data.external_ref},
            )

        logger.info(f"Created candidate {row['id']} ({full_name})")
        return self.build_response(row)

    async def get(self, candidate_id: uuid.UUID) -> CandidateDetailResponse:
        row = await self.store.candidates.get_by_id(candidate_id)
        if not row:
            raise NotFoundError("Candidate", str(candidate_id))
        files = await self.store.candidate_files.list_by_candidate(candidate_id)
        return CandidateDetailResponse(
            **self._candidate_fields(row),
            files=[self.build_file_response(f) for f in files],
        )

    async def update(self, candidate_id: uuid.UUID, data: CandidateUpdate) -> CandidateResponse:
        fields = data.model_dump(exclude_unset=True)
        if "full_name" in fields and fields["full_name"] is not None:
            fields["full_name"] = fields["full_name"].strip()
            if not fields["full_name"]:
                raise ValidationError("Candidate full name cannot be empty", field="full_name")

        row = await self.store.candidates.update(candidate_id, **fields)
        if not row:
            raise NotFoundError("Candidate", str(candidate_id))
        return self.build_response(row)

    async def list_candidates(self, search: Optional[str] = None) -> list[CandidateListResponse]:
        rows = await self.store.candidates.list_with_position_counts(search=search)
        return [
            CandidateListResponse(**self._candidate_fields(row), position_count=row["position_count"] or 0)
            for row in rows
        ]

    async def list_files(self, candidate_id: uuid.UUID) -> list[CandidateFileResponse]:
        rows = await self.store.candidate_files.list_by_candidate(candidate_id)
        return [self.build_file_response(row) for row in rows]

    async def add_file(self, candidate_id: uuid.UUID, data: CandidateFileCreate) -> CandidateFileResponse:
        if not await self.store.candidates.get_by_id(candidate_id):
            raise NotFoundError("Candidate", str(candidate_id))
        row = await self.store.candidate_files.create(
            candidate_id=candidate_id,
            file_url=data.file_url,
            file_name=data.file_name,
            file_type=data.file_type,
        )
        return self.build_file_response(row)

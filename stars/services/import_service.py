"""
Candidate import from Manatal.

Creates a local candidate from a Manatal record. Only the core candidate
fetch is required; education/experience history and the resume are
enrichment and degrade to warnings when they fail.
"""
import asyncio
import logging
import mimetypes
import posixpath
from datetime import datetime
from typing import Callable, Optional, Sequence
from urllib.parse import unquote, urlparse

import asyncpg

from stars.config import RESUME_MAX_BYTES, STORAGE_BUCKET
from stars.exceptions import AlreadyImportedError
from stars.models import ImportResult, ManatalEducation, ManatalExperience
from stars.repositories import PipelineStore
from stars.services.manatal_service import ManatalClient
from stars.services.storage_service import SupabaseStorageClient
from stars.utils import utc_now, year_of, year_month_of

logger = logging.getLogger(__name__)

DEFAULT_RESUME_NAME = "resume.pdf"


def format_education(education: ManatalEducation) -> str:
    line = f"- {education.degree or 'Degree'} at {education.school or 'Unknown'}"
    year = year_of(education.end_date or education.start_date)
    if year:
        line += f" ({year})"
    return line


def format_experience(experience: ManatalExperience) -> str:
    line = f"- {experience.title or 'Role'} at {experience.company or 'Company'}"
    start = year_month_of(experience.start_date)
    if start:
        end = None if experience.is_current else year_month_of(experience.end_date)
        line += f" ({start} - {end or 'Present'})"
    return line


def build_summary(
    description: Optional[str],
    educations: Sequence[ManatalEducation],
    experiences: Sequence[ManatalExperience],
) -> Optional[str]:
    """
    Description, then an "Education:" block, then an "Experience:" block.

    Empty parts are left out; blocks are separated by a blank line.
    """
    sections = []

    if description and description.strip():
        sections.append(description.strip())

    if educations:
        sections.append("\n".join(["Education:"] + [format_education(e) for e in educations]))

    if experiences:
        sections.append("\n".join(["Experience:"] + [format_experience(e) for e in experiences]))

    return "\n\n".join(sections) or None


def resume_file_name(url: str, content_type: Optional[str] = None) -> str:
    """File name for a mirrored resume, taken from the URL path."""
    name = posixpath.basename(unquote(urlparse(url).path)) or DEFAULT_RESUME_NAME
    if not posixpath.splitext(name)[1] and content_type:
        extension = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if extension:
            name += extension
    return name


class ImportService:
    """Imports Manatal candidates into the local candidate pool."""

    def __init__(
        self,
        store: PipelineStore,
        manatal: Optional[ManatalClient] = None,
        storage: Optional[SupabaseStorageClient] = None,
        bucket: str = STORAGE_BUCKET,
        max_resume_bytes: int = RESUME_MAX_BYTES,
        now: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.manatal = manatal or ManatalClient()
        self.storage = storage or SupabaseStorageClient()
        self.bucket = bucket
        self.max_resume_bytes = max_resume_bytes
        self.now = now

    async def import_candidate(self, manatal_id: int) -> ImportResult:
        """
        Import one candidate.

        Raises:
            AlreadyImportedError: A candidate with this Manatal id exists
            ATSProviderError (and subclasses): The core candidate fetch failed
        """
        existing = await self.store.candidates.get_by_manatal_id(manatal_id)
        if existing:
            raise AlreadyImportedError(manatal_id, str(existing["id"]))

        source = await self.manatal.get_candidate(manatal_id)
        warnings: list[str] = []

        educations, experiences = await asyncio.gather(
            self.manatal.list_educations(manatal_id),
            self.manatal.list_experiences(manatal_id),
            return_exceptions=True,
        )
        error = next((r for r in (educations, experiences) if isinstance(r, BaseException)), None)
        if isinstance(error, asyncio.CancelledError):
            raise error
        if error is not None:
            logger.warning(f"Manatal history fetch failed for {manatal_id}: {error}")
            warnings.append(f"Could not fetch education/experience history: {error}")
            educations, experiences = [], []

        try:
            row = await self.store.candidates.create(
                full_name=source.full_name,
                email=source.email,
                phone=source.phone_number,
                current_role=source.current_position,
                current_company=source.current_company,
                summary=build_summary(source.description, educations, experiences),
                external_ref=str(manatal_id),
                manatal_id=manatal_id,
                manatal_url=ManatalClient.candidate_url(manatal_id),
                manatal_imported_at=self.now(),
            )
        except asyncpg.UniqueViolationError:
            raise AlreadyImportedError(manatal_id)

        candidate_id = row["id"]
        logger.info(f"Imported Manatal candidate {manatal_id} as {candidate_id}")

        has_resume = False
        if source.resume:
            try:
                has_resume = await self._mirror_resume(candidate_id, source.resume)
            except Exception as e:
                logger.warning(f"Resume import failed for candidate {candidate_id}: {e}")
                warnings.append(f"Resume could not be imported: {e}")

        return ImportResult(
            candidate_id=str(candidate_id),
            success=True,
            has_resume=has_resume,
            warnings=warnings,
        )

    async def _mirror_resume(self, candidate_id, resume_url: str) -> bool:
        """Download the resume, upload it to storage and record the file."""
        data, content_type = await self.storage.download(resume_url, self.max_resume_bytes)
        content_type = content_type or "application/octet-stream"
        file_name = resume_file_name(resume_url, content_type)
        path = f"candidates/{candidate_id}/{file_name}"

        file_url = await self.storage.upload(self.bucket, path, data, content_type)
        await self.store.candidate_files.create(
            candidate_id=candidate_id,
            file_url=file_url,
            file_name=file_name,
            file_type=content_type.split(";")[0].strip(),
        )
        return True

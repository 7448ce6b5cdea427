"""
Email delivery via the Resend HTTP API.

Notification emails are never sent inline: the workflow hands EmailJobs to
the BackgroundEmailQueue, which schedules EmailDispatcher.send as a
fire-and-forget task. Every send attempt leaves exactly one email_log row.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional, Callable
from datetime import datetime

import httpx

from stars.config import (
    RESEND_API_KEY,
    RESEND_API_URL,
    RESEND_FROM_EMAIL,
    EMAIL_SENDER_NAME,
)
from stars.models import EmailJob, EmailLogResponse, EmailStatus
from stars.repositories import PipelineStore
from stars.utils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class ResendResult:
    """Outcome of one Resend API call: a message id, or the provider's error message."""
    id: Optional[str] = None
    error: Optional[str] = None


class ResendClient:
    """Minimal async client for POST /emails."""

    def __init__(
        self,
        api_key: str,
        base_url: str = RESEND_API_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def send(self, from_: str, to: str, subject: str, html: str) -> ResendResult:
        """
        Send one email.

        Non-2xx responses are returned as ResendResult(error=...).
        Network errors propagate.
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                "/emails",
                json={"from": from_, "to": [to], "subject": subject, "html": html},
                headers={"Authorization": f"Bearer {self.api_key}"},
            )

        if response.is_success:
            return ResendResult(id=response.json().get("id"))

        try:
            message = response.json().get("message")
        except ValueError:
            message = response.text
        return ResendResult(error=message or f"Resend returned HTTP {response.status_code}")


class EmailDispatcher:
    """Sends one EmailJob and records the outcome in the email log. Never raises."""

    def __init__(
        self,
        store: PipelineStore,
        client: Optional[ResendClient] = None,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        now: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.api_key = RESEND_API_KEY if api_key is None else api_key
        self.from_email = from_email or RESEND_FROM_EMAIL
        self.client = client or (ResendClient(self.api_key) if self.api_key else None)
        self.now = now

    @property
    def sender(self) -> str:
        return f"{EMAIL_SENDER_NAME} <{self.from_email}>"

    async def send(self, job: EmailJob) -> None:
        if not self.api_key or self.client is None:
            logger.error("[Email] RESEND_API_KEY not configured")
            await self._log(job, EmailStatus.FAILED, error="RESEND_API_KEY not configured")
            return

        try:
            result = await self.client.send(self.sender, job.to, job.subject, job.html)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"[Email] Exception sending '{job.template_name}' to {job.to}: {message}")
            await self._log(job, EmailStatus.FAILED, error=message)
            return

        if result.error:
            logger.error(f"[Email] Resend error for '{job.template_name}' to {job.to}: {result.error}")
            await self._log(job, EmailStatus.FAILED, error=result.error)
            return

        logger.info(f"[Email] Sent '{job.template_name}' to {job.to} (id={result.id})")
        await self._log(job, EmailStatus.SENT, provider_message_id=result.id)

    async def _log(
        self,
        job: EmailJob,
        status: EmailStatus,
        error: Optional[str] = None,
        provider_message_id: Optional[str] = None,
    ) -> None:
        related_id = (
            uuid.UUID(job.related_candidate_position_id)
            if job.related_candidate_position_id else None
        )
        try:
            await self.store.email_log.create(
                to=job.to,
                subject=job.subject,
                template_name=job.template_name,
                related_event_type=job.related_event_type,
                related_candidate_position_id=related_id,
                sent_at=self.now(),
                status=status.value,
                error=error,
                provider_message_id=provider_message_id,
            )
        except Exception as e:
            logger.error(f"[Email] Failed to write email log for {job.to}: {e}", exc_info=True)


class BackgroundEmailQueue:
    """
    Fire-and-forget scheduling of EmailDispatcher.send.

    Holds a reference to each in-flight task until it finishes so tasks are
    not garbage collected mid-send. drain() waits for whatever is pending.
    """

    def __init__(self, dispatcher: EmailDispatcher):
        self.dispatcher = dispatcher
        self._tasks: set[asyncio.Task] = set()

    def enqueue(self, jobs: Iterable[EmailJob]) -> int:
        """Schedule every job and return how many were scheduled."""
        count = 0
        for job in jobs:
            task = asyncio.create_task(self.dispatcher.send(job))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            count += 1
        if count:
            logger.info(f"[Email] Queued {count} email(s)")
        return count

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for all in-flight sends (called on shutdown and in tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


class EmailLogService:
    """Read access to the email delivery log."""

    def __init__(self, store: PipelineStore):
        self.store = store

    async def list_entries(
        self,
        related_event_type: Optional[str] = None,
        related_candidate_position_id: Optional[uuid.UUID] = None,
        limit: int = 50,
    ) -> list[EmailLogResponse]:
        rows = await self.store.email_log.list_entries(
            related_event_type=related_event_type,
            related_candidate_position_id=related_candidate_position_id,
            limit=limit,
        )
        return [self._row_to_response(row) for row in rows]

    @staticmethod
    def _row_to_response(row) -> EmailLogResponse:
        return EmailLogResponse(
            id=str(row["id"]),
            to=row["to"],
            subject=row["subject"],
            template_name=row["template_name"],
            related_event_type=row["related_event_type"],
            related_candidate_position_id=(
                str(row["related_candidate_position_id"])
                if row["related_candidate_position_id"] else None
            ),
            sent_at=row["sent_at"],
            status=row["status"],
            error=row["error"],
            provider_message_id=row["provider_message_id"],
        )

"""
Tests for the Resend client, the email dispatcher and the background queue.

The Resend API is replaced with httpx.MockTransport.
"""
import json
import uuid

import httpx
import pytest

from stars.models import EmailJob
from stars.services import BackgroundEmailQueue, EmailDispatcher, EmailLogService, ResendClient


def make_job(**overrides) -> EmailJob:
    fields = dict(
        to="carla@acme.test",
        subject="Candidate Approved: Jane Doe",
        html="<p>approved</p>",
        template_name="workflow-approved",
        related_event_type="stage_change",
        related_candidate_position_id=str(uuid.uuid4()),
    )
    fields.update(overrides)
    return EmailJob(**fields)


def resend_client(handler) -> ResendClient:
    return ResendClient("re_test_key", base_url="https://resend.test", transport=httpx.MockTransport(handler))


class TestResendClient:

    @pytest.mark.asyncio
    async def test_posts_expected_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "msg_123"})

        result = await resend_client(handler).send("Nimble <n@nimble.la>", "a@b.test", "Hi", "<p>x</p>")

        assert result.id == "msg_123"
        assert result.error is None
        assert seen["url"] == "https://resend.test/emails"
        assert seen["auth"] == "Bearer re_test_key"
        assert seen["body"] == {
            "from": "Nimble <n@nimble.la>",
            "to": ["a@b.test"],
            "subject": "Hi",
            "html": "<p>x</p>",
        }

    @pytest.mark.asyncio
    async def test_provider_error_message_is_returned(self):
        def handler(request):
            return httpx.Response(422, json={"message": "Invalid `to` field"})

        result = await resend_client(handler).send("f", "bad", "s", "h")

        assert result.id is None
        assert result.error == "Invalid `to` field"

    @pytest.mark.asyncio
    async def test_error_without_json_body(self):
        def handler(request):
            return httpx.Response(500, text="")

        result = await resend_client(handler).send("f", "t", "s", "h")

        assert result.error == "Resend returned HTTP 500"


class TestEmailDispatcher:

    @pytest.mark.asyncio
    async def test_success_logs_sent(self, store, clock):
        def handler(request):
            return httpx.Response(200, json={"id": "msg_ok"})

        dispatcher = EmailDispatcher(store, client=resend_client(handler), api_key="re_test_key", now=clock)
        job = make_job()

        await dispatcher.send(job)

        assert len(store.email_log.rows) == 1
        row = store.email_log.rows[0]
        assert row["status"] == "sent"
        assert row["provider_message_id"] == "msg_ok"
        assert row["error"] is None
        assert row["to"] == job.to
        assert row["template_name"] == "workflow-approved"
        assert row["related_candidate_position_id"] == uuid.UUID(job.related_candidate_position_id)
        assert row["sent_at"] == clock.current

    @pytest.mark.asyncio
    async def test_missing_api_key_logs_failed(self, store):
        dispatcher = EmailDispatcher(store, api_key="")

        await dispatcher.send(make_job())

        assert len(store.email_log.rows) == 1
        assert store.email_log.rows[0]["status"] == "failed"
        assert store.email_log.rows[0]["error"] == "RESEND_API_KEY not configured"

    @pytest.mark.asyncio
    async def test_provider_error_logs_failed(self, store):
        def handler(request):
            return httpx.Response(403, json={"message": "Domain not verified"})

        dispatcher = EmailDispatcher(store, client=resend_client(handler), api_key="re_test_key")

        await dispatcher.send(make_job())

        assert [(r["status"], r["error"]) for r in store.email_log.rows] == [("failed", "Domain not verified")]

    @pytest.mark.asyncio
    async def test_network_exception_logs_failed(self, store):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        dispatcher = EmailDispatcher(store, client=resend_client(handler), api_key="re_test_key")

        await dispatcher.send(make_job())

        assert len(store.email_log.rows) == 1
        assert store.email_log.rows[0]["status"] == "failed"
        assert "connection refused" in store.email_log.rows[0]["error"]

    @pytest.mark.asyncio
    async def test_log_write_failure_is_swallowed(self, store):
        async def broken_create(**kwargs):
            raise RuntimeError("email_log unavailable")

        store.email_log.create = broken_create
        dispatcher = EmailDispatcher(store, api_key="")

        await dispatcher.send(make_job())

    @pytest.mark.asyncio
    async def test_job_without_candidate_position(self, store):
        dispatcher = EmailDispatcher(store, api_key="")

        await dispatcher.send(make_job(related_candidate_position_id=None, related_event_type="client_login"))

        assert store.email_log.rows[0]["related_candidate_position_id"] is None

    def test_sender_includes_display_name(self, store):
        dispatcher = EmailDispatcher(store, api_key="k", from_email="notify@stars.test")

        assert dispatcher.sender == "Nimble S.T.A.R.S <notify@stars.test>"


class TestBackgroundEmailQueue:

    @pytest.mark.asyncio
    async def test_enqueue_returns_immediately_and_drain_finishes(self, store):
        sent = []

        def handler(request):
            sent.append(json.loads(request.content)["to"][0])
            return httpx.Response(200, json={"id": f"msg_{len(sent)}"})

        queue = BackgroundEmailQueue(
            EmailDispatcher(store, client=resend_client(handler), api_key="re_test_key")
        )

        count = queue.enqueue([make_job(to="a@x.test"), make_job(to="b@x.test")])

        assert count == 2
        assert store.email_log.rows == []

        await queue.drain()

        assert sorted(sent) == ["a@x.test", "b@x.test"]
        assert len(store.email_log.rows) == 2
        assert queue.pending == 0

    @pytest.mark.asyncio
    async def test_enqueue_nothing(self, store):
        queue = BackgroundEmailQueue(EmailDispatcher(store, api_key=""))

        assert queue.enqueue([]) == 0
        await queue.drain()


class TestEmailLogService:

    @pytest.mark.asyncio
    async def test_filters_by_event_type(self, store):
        dispatcher = EmailDispatcher(store, api_key="")
        await dispatcher.send(make_job())
        await dispatcher.send(make_job(related_event_type="new_comment", template_name="new-comment"))

        entries = await EmailLogService(store).list_entries(related_event_type="new_comment")

        assert [e.template_name for e in entries] == ["new-comment"]
        assert entries[0].status.value == "failed"

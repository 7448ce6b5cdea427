"""
Tests for notification routing, wording and per-recipient writes.
"""
import uuid

import pytest

from stars.models import NotificationType, UserRole
from stars.services import Actor, NotificationEvent, NotificationFanout


def admin_actor(world) -> Actor:
    return Actor(id=world.admin["id"], name=world.admin["name"], role=UserRole.ADMIN)


def client_actor(world) -> Actor:
    return Actor(id=world.client["id"], name=world.client["name"], role=UserRole.CLIENT)


def pipeline_event(world, event_type, actor, **fields) -> NotificationEvent:
    return NotificationEvent(
        type=event_type,
        actor=actor,
        candidate_position_id=uuid.uuid4(),
        candidate_id=world.candidate["id"],
        candidate_name=world.candidate["full_name"],
        position_id=world.position["id"],
        position_title=world.position["title"],
        org_id=world.org["id"],
        org_name=world.org["name"],
        **fields,
    )


@pytest.fixture
def fanout(store, clock) -> NotificationFanout:
    return NotificationFanout(store, app_url="https://stars.test/", now=clock)


class TestResolveRecipients:

    @pytest.mark.asyncio
    async def test_assignment_goes_to_org_clients(self, fanout, world):
        event = pipeline_event(world, NotificationType.CANDIDATE_ASSIGNED, admin_actor(world))

        recipients = await fanout.resolve_recipients(event)

        assert {r["id"] for r in recipients} == {world.client["id"], world.second_client["id"]}

    @pytest.mark.asyncio
    async def test_client_stage_change_goes_to_admins(self, fanout, world):
        event = pipeline_event(
            world, NotificationType.STAGE_CHANGE, client_actor(world),
            from_stage="submitted", to_stage="to_interview",
        )

        recipients = await fanout.resolve_recipients(event)

        assert {r["id"] for r in recipients} == {world.admin["id"], world.other_admin["id"]}

    @pytest.mark.asyncio
    async def test_admin_approval_adds_other_admins_but_not_actor(self, fanout, world):
        event = pipeline_event(
            world, NotificationType.STAGE_CHANGE, admin_actor(world),
            from_stage="to_interview", to_stage="approved",
        )

        recipients = await fanout.resolve_recipients(event)

        ids = [r["id"] for r in recipients]
        assert set(ids) == {world.client["id"], world.second_client["id"], world.other_admin["id"]}
        assert world.admin["id"] not in ids
        assert len(ids) == len(set(ids))

    @pytest.mark.asyncio
    async def test_admin_non_approval_skips_admins(self, fanout, world):
        event = pipeline_event(
            world, NotificationType.STAGE_CHANGE, admin_actor(world),
            from_stage="submitted", to_stage="rejected",
        )

        recipients = await fanout.resolve_recipients(event)

        assert all(r["role"] == "client" for r in recipients)

    @pytest.mark.asyncio
    async def test_inactive_users_are_skipped(self, fanout, world, store):
        await store.users.set_active(world.other_admin["id"], False)
        event = pipeline_event(world, NotificationType.NEW_COMMENT, client_actor(world), comment_body="hi")

        recipients = await fanout.resolve_recipients(event)

        assert [r["id"] for r in recipients] == [world.admin["id"]]

    @pytest.mark.asyncio
    async def test_position_without_org_has_no_client_audience(self, fanout, world):
        event = pipeline_event(world, NotificationType.CANDIDATE_ASSIGNED, admin_actor(world))
        event.org_id = None

        assert await fanout.resolve_recipients(event) == []


class TestPlan:

    def test_message_fallbacks(self, world):
        event = NotificationEvent(
            type=NotificationType.CANDIDATE_ASSIGNED,
            actor=Actor(id=uuid.uuid4(), name="Ana Admin", role=UserRole.ADMIN),
        )

        assert NotificationFanout.message_for(event) == "a candidate was added to Unknown"

    def test_stage_change_message_uses_labels(self, world):
        event = pipeline_event(
            world, NotificationType.STAGE_CHANGE, admin_actor(world),
            from_stage="submitted", to_stage="to_interview",
        )

        assert NotificationFanout.message_for(event) == "Ana Admin moved Jane Doe from Submitted to Interview"

    def test_plan_builds_one_email_per_recipient(self, fanout, world):
        event = pipeline_event(
            world, NotificationType.STAGE_CHANGE, client_actor(world),
            from_stage="submitted", to_stage="approved",
        )

        planned = fanout.plan(event, [world.admin, world.other_admin])

        assert [p.recipient_id for p in planned] == [world.admin["id"], world.other_admin["id"]]
        assert [p.email.to for p in planned] == ["ana@nimble.la", "omar@nimble.la"]
        for p in planned:
            assert p.email.related_event_type == "stage_change"
            assert p.email.related_candidate_position_id == str(event.candidate_position_id)
            assert "https://stars.test/admin/candidates/" in p.email.html

    def test_client_links_point_at_position(self, fanout, world):
        event = pipeline_event(world, NotificationType.NEW_COMMENT, admin_actor(world), comment_body="note")

        planned = fanout.plan(event, [world.client])

        expected = f"https://stars.test/positions/{world.position['id']}/candidates/{world.candidate['id']}"
        assert expected in planned[0].email.html

    def test_long_comment_is_truncated_in_email(self, fanout, world):
        body = "x" * 250
        event = pipeline_event(world, NotificationType.NEW_COMMENT, client_actor(world), comment_body=body)

        planned = fanout.plan(event, [world.admin])

        assert "x" * 200 + "..." in planned[0].email.html
        assert "x" * 201 not in planned[0].email.html

    def test_html_is_escaped(self, fanout, world):
        event = pipeline_event(world, NotificationType.CANDIDATE_ASSIGNED, admin_actor(world))
        event.candidate_name = "<script>alert(1)</script>"

        planned = fanout.plan(event, [world.client])

        assert "<script>" not in planned[0].email.html
        assert "&lt;script&gt;" in planned[0].email.html


class TestDispatch:

    @pytest.mark.asyncio
    async def test_dispatch_writes_unread_notifications(self, fanout, world, store, clock):
        event = pipeline_event(world, NotificationType.CANDIDATE_ASSIGNED, admin_actor(world))

        result = await fanout.dispatch(event)

        assert result.created == 2
        assert result.failed == 0
        assert len(result.email_jobs) == 2
        for row in store.notifications.rows:
            assert row["is_read"] is False
            assert row["created_at"] == clock.current
            assert row["related_candidate_position_id"] == event.candidate_position_id

    @pytest.mark.asyncio
    async def test_dispatch_counts_failures(self, fanout, world, store):
        store.notifications.fail_for.add(world.second_client["id"])
        event = pipeline_event(world, NotificationType.CANDIDATE_ASSIGNED, admin_actor(world))

        result = await fanout.dispatch(event)

        assert (result.created, result.failed) == (1, 1)

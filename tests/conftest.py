"""
Pytest fixtures for S.T.A.R.S backend tests.

Services run against the in-memory store from fakes.py; HTTP collaborators
are replaced with httpx.MockTransport.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from stars.models import UserRole
from stars.repositories import PipelineStore
from stars.services import NotificationFanout, StageWorkflowService

from tests.fakes import RecordingEmailQueue, make_fake_store


class Clock:
    """Settable clock passed to services as ``now``."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass
class World:
    """One organization with two clients, two admins, an open position and a candidate."""
    org: dict
    other_org: dict
    admin: dict
    other_admin: dict
    client: dict
    second_client: dict
    outside_client: dict
    position: dict
    candidate: dict


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> PipelineStore:
    return make_fake_store()


@pytest.fixture
def email_queue() -> RecordingEmailQueue:
    return RecordingEmailQueue()


@pytest.fixture
def workflow(store, email_queue, clock) -> StageWorkflowService:
    fanout = NotificationFanout(store, app_url="https://stars.test", now=clock)
    return StageWorkflowService(store, email_queue, fanout=fanout, now=clock)


@pytest.fixture
async def world(store) -> World:
    org = await store.organizations.create(name="Acme Corp")
    other_org = await store.organizations.create(name="Globex")

    admin = await store.users.create(email="ana@nimble.la", name="Ana Admin", role=UserRole.ADMIN.value)
    other_admin = await store.users.create(email="omar@nimble.la", name="Omar Admin", role=UserRole.ADMIN.value)
    client = await store.users.create(
        email="carla@acme.test", name="Carla Client", role=UserRole.CLIENT.value, org_id=org["id"]
    )
    second_client = await store.users.create(
        email="dan@acme.test", name="Dan Client", role=UserRole.CLIENT.value, org_id=org["id"]
    )
    outside_client = await store.users.create(
        email="gina@globex.test", name="Gina Globex", role=UserRole.CLIENT.value, org_id=other_org["id"]
    )

    position = await store.positions.create(title="Backend Engineer", org_id=org["id"])
    candidate = await store.candidates.create(
        full_name="Jane Doe", email="jane@example.com", current_role="Senior Developer"
    )

    return World(
        org=org,
        other_org=other_org,
        admin=admin,
        other_admin=other_admin,
        client=client,
        second_client=second_client,
        outside_client=outside_client,
        position=position,
        candidate=candidate,
    )

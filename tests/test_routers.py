"""
HTTP-level tests: routing, auth guards, camelCase payloads and error bodies.

Dependencies are overridden with the in-memory store and a recording email
queue; the app lifespan (database pool) is not started.
"""
import uuid

import httpx
import pytest

from app import app
from stars.auth import CurrentUser, get_current_user
from stars.dependencies import get_email_queue, get_pool, get_store


@pytest.fixture
def login_as(store, email_queue):
    """Override dependencies and sign in as the given user row."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_email_queue] = lambda: email_queue

    def sign_in(row):
        app.dependency_overrides[get_current_user] = lambda: CurrentUser.from_row(row)

    yield sign_in
    app.dependency_overrides.clear()


@pytest.fixture
async def api():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def actor(user) -> dict:
    return {"userId": str(user["id"]), "userName": user["name"]}


async def assign(api, world) -> str:
    response = await api.post("/pipeline/assignments", json={
        **actor(world.admin),
        "candidateId": str(world.candidate["id"]),
        "positionId": str(world.position["id"]),
    })
    assert response.status_code == 201
    return response.json()["candidatePositionId"]


class TestPipelineEndpoints:

    @pytest.mark.asyncio
    async def test_assign_and_read_back(self, api, world, login_as, email_queue):
        login_as(world.admin)

        cp_id = await assign(api, world)
        response = await api.get(f"/pipeline/{cp_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["stage"] == "submitted"
        assert body["candidateId"] == str(world.candidate["id"])
        assert "lastInteractionAt" in body
        assert {job.to for job in email_queue.jobs} == {"carla@acme.test", "dan@acme.test"}

    @pytest.mark.asyncio
    async def test_duplicate_assignment_is_conflict(self, api, world, login_as):
        login_as(world.admin)
        await assign(api, world)

        response = await api.post("/pipeline/assignments", json={
            **actor(world.admin),
            "candidateId": str(world.candidate["id"]),
            "positionId": str(world.position["id"]),
        })

        assert response.status_code == 409
        assert response.json()["kind"] == "duplicate_assignment"

    @pytest.mark.asyncio
    async def test_client_cannot_assign(self, api, world, login_as):
        login_as(world.client)

        response = await api.post("/pipeline/assignments", json={
            **actor(world.client),
            "candidateId": str(world.candidate["id"]),
            "positionId": str(world.position["id"]),
        })

        assert response.status_code == 403
        assert response.json()["kind"] == "authorization"

    @pytest.mark.asyncio
    async def test_acting_user_must_be_caller(self, api, world, login_as, store):
        login_as(world.admin)
        cp_id = await assign(api, world)
        login_as(world.client)

        response = await api.patch(f"/pipeline/{cp_id}/stage", json={
            **actor(world.second_client),
            "stage": "approved",
        })

        assert response.status_code == 403
        assert store.candidate_positions.rows[uuid.UUID(cp_id)]["stage"] == "submitted"

    @pytest.mark.asyncio
    async def test_client_changes_stage(self, api, world, login_as, store):
        login_as(world.admin)
        cp_id = await assign(api, world)
        login_as(world.client)

        response = await api.patch(f"/pipeline/{cp_id}/stage", json={**actor(world.client), "stage": "approved"})

        assert response.status_code == 204
        assert store.candidate_positions.rows[uuid.UUID(cp_id)]["stage"] == "approved"
        admin_messages = [n["message"] for n in store.notifications.for_user(world.admin["id"])]
        assert "Carla Client moved Jane Doe from Submitted to Approved" in admin_messages

    @pytest.mark.asyncio
    async def test_invalid_stage(self, api, world, login_as):
        login_as(world.admin)
        cp_id = await assign(api, world)

        response = await api.patch(f"/pipeline/{cp_id}/stage", json={**actor(world.admin), "stage": "hired"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Invalid stage: hired",
            "kind": "invalid_stage",
            "details": {},
        }

    @pytest.mark.asyncio
    async def test_malformed_id(self, api, world, login_as):
        login_as(world.admin)

        response = await api.get("/pipeline/not-a-uuid")

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_uuid"

    @pytest.mark.asyncio
    async def test_comment_round_trip(self, api, world, login_as):
        login_as(world.admin)
        cp_id = await assign(api, world)
        login_as(world.client)

        created = await api.post(f"/pipeline/{cp_id}/comments", json={**actor(world.client), "body": "Great fit"})
        comments = await api.get(f"/pipeline/{cp_id}/comments")

        assert created.status_code == 201
        assert [c["body"] for c in comments.json()] == ["Great fit"]
        assert comments.json()[0]["userName"] == "Carla Client"

    @pytest.mark.asyncio
    async def test_client_cannot_read_other_org_pipeline(self, api, world, login_as):
        login_as(world.outside_client)

        response = await api.get(f"/pipeline/positions/{world.position['id']}")

        assert response.status_code == 403


class TestPipelineOrgScope:
    """Clients of another organization cannot reach a candidate position."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method, suffix, body", [
        ("GET", "", None),
        ("PATCH", "/stage", {"stage": "rejected"}),
        ("GET", "/comments", None),
        ("POST", "/comments", {"body": "Not my candidate"}),
        ("GET", "/activity", None),
    ])
    async def test_outside_client_is_forbidden(self, api, world, login_as, store, method, suffix, body):
        login_as(world.admin)
        cp_id = await assign(api, world)
        notifications_before = len(store.notifications.rows)
        login_as(world.outside_client)

        payload = {**actor(world.outside_client), **body} if body else None
        response = await api.request(method, f"/pipeline/{cp_id}{suffix}", json=payload)

        assert response.status_code == 403
        assert response.json()["kind"] == "authorization"
        assert store.candidate_positions.rows[uuid.UUID(cp_id)]["stage"] == "submitted"
        assert store.comments.rows == {}
        assert len(store.notifications.rows) == notifications_before

    @pytest.mark.asyncio
    async def test_own_org_client_reads_timeline(self, api, world, login_as):
        login_as(world.admin)
        cp_id = await assign(api, world)
        login_as(world.second_client)

        response = await api.get(f"/pipeline/{cp_id}/activity")

        assert response.status_code == 200
        assert [entry["action"] for entry in response.json()] == ["assigned"]

    @pytest.mark.asyncio
    async def test_unknown_candidate_position(self, api, world, login_as):
        login_as(world.client)

        response = await api.get(f"/pipeline/{uuid.uuid4()}/comments")

        assert response.status_code == 404


class TestOtherEndpoints:

    @pytest.mark.asyncio
    async def test_client_sees_own_org_only(self, api, world, login_as):
        login_as(world.client)

        own = await api.get(f"/organizations/{world.org['id']}")
        other = await api.get(f"/organizations/{world.other_org['id']}")

        assert own.status_code == 200
        assert own.json()["name"] == "Acme Corp"
        assert other.status_code == 403

    @pytest.mark.asyncio
    async def test_login_notifies_admins(self, api, world, login_as, store):
        login_as(world.client)

        response = await api.post("/auth/login")

        assert response.status_code == 200
        assert response.json() == {"userId": str(world.client["id"]), "notifiedAdmins": True}
        assert len(store.notifications.for_user(world.admin["id"])) == 1

    @pytest.mark.asyncio
    async def test_unread_count(self, api, world, login_as):
        login_as(world.admin)
        await assign(api, world)
        login_as(world.client)

        response = await api.get("/notifications/count")

        assert response.json() == {"userId": str(world.client["id"]), "unread": 1}

    @pytest.mark.asyncio
    async def test_create_user_validation_error(self, api, world, login_as):
        login_as(world.admin)

        response = await api.post("/users", json={"email": "x@y.test", "name": "X", "role": "client"})

        assert response.status_code == 400
        assert response.json()["kind"] == "validation"

    @pytest.mark.asyncio
    async def test_health(self, api):
        class Pool:
            async def fetchval(self, query):
                return 1

        class DownPool:
            async def fetchval(self, query):
                raise OSError("connection refused")

        app.dependency_overrides[get_pool] = lambda: Pool()
        healthy = await api.get("/health")
        app.dependency_overrides[get_pool] = lambda: DownPool()
        unhealthy = await api.get("/health")
        app.dependency_overrides.clear()

        assert healthy.status_code == 200
        assert healthy.json()["database"] == "connected"
        assert unhealthy.status_code == 503
        assert unhealthy.json()["status"] == "unhealthy"

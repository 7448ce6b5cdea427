"""
Tests for organization, user, position and candidate management.
"""
import uuid

import pytest

from stars.exceptions import ConflictError, InvalidUUIDError, NotFoundError, ValidationError
from stars.models import (
    CandidateCreate,
    CandidateFileCreate,
    CandidateUpdate,
    OrganizationCreate,
    OrganizationUpdate,
    PositionCreate,
    PositionStatus,
    UserCreate,
    UserRole,
)
from stars.services import CandidateService, OrganizationService, PositionService, UserService


class TestOrganizations:

    @pytest.mark.asyncio
    async def test_create_trims_name(self, store):
        org = await OrganizationService(store).create(OrganizationCreate(name="  Initech  "))

        assert org.name == "Initech"

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, store):
        with pytest.raises(ValidationError) as exc_info:
            await OrganizationService(store).create(OrganizationCreate(name="   "))

        assert exc_info.value.field == "name"
        assert store.organizations.rows == {}

    @pytest.mark.asyncio
    async def test_update_branding(self, store, world):
        service = OrganizationService(store)

        org = await service.update_branding(
            world.org["id"], OrganizationUpdate(logo_url="https://cdn.test/acme.png", primary_color="#112233")
        )

        assert org.primary_color == "#112233"
        assert org.logo_url == "https://cdn.test/acme.png"

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        with pytest.raises(NotFoundError):
            await OrganizationService(store).get(uuid.uuid4())


class TestUsers:

    @pytest.mark.asyncio
    async def test_create_client(self, store, world):
        user = await UserService(store).create(UserCreate(
            email="eve@acme.test", name="Eve Client", role=UserRole.CLIENT, org_id=str(world.org["id"])
        ))

        assert user.role == UserRole.CLIENT
        assert user.org_id == str(world.org["id"])
        assert user.is_active is True

    @pytest.mark.asyncio
    async def test_admin_with_org_rejected(self, store, world):
        with pytest.raises(ValidationError) as exc_info:
            await UserService(store).create(UserCreate(
                email="zed@nimble.la", name="Zed", role=UserRole.ADMIN, org_id=str(world.org["id"])
            ))

        assert exc_info.value.field == "org_id"

    @pytest.mark.asyncio
    async def test_client_without_org_rejected(self, store):
        with pytest.raises(ValidationError):
            await UserService(store).create(UserCreate(email="x@y.test", name="X", role=UserRole.CLIENT))

    @pytest.mark.asyncio
    async def test_client_with_unknown_org(self, store):
        with pytest.raises(NotFoundError):
            await UserService(store).create(UserCreate(
                email="x@y.test", name="X", role=UserRole.CLIENT, org_id=str(uuid.uuid4())
            ))

    @pytest.mark.asyncio
    async def test_client_with_malformed_org(self, store):
        with pytest.raises(ValidationError):
            await UserService(store).create(UserCreate(
                email="x@y.test", name="X", role=UserRole.CLIENT, org_id="acme"
            ))

    @pytest.mark.asyncio
    async def test_duplicate_email(self, store, world):
        with pytest.raises(ConflictError):
            await UserService(store).create(UserCreate(email="ANA@nimble.la", name="Ana", role=UserRole.ADMIN))

    @pytest.mark.asyncio
    async def test_deactivate(self, store, world):
        service = UserService(store)

        user = await service.set_active(world.second_client["id"], False)

        assert user.is_active is False
        names = [u.name for u in await service.list_by_org(world.org["id"])]
        assert names == ["Carla Client", "Dan Client"]

    @pytest.mark.asyncio
    async def test_list_admins(self, store, world):
        admins = await UserService(store).list_admins()

        assert [a.name for a in admins] == ["Ana Admin", "Omar Admin"]


class TestPositions:

    @pytest.mark.asyncio
    async def test_create_and_close(self, store, world):
        service = PositionService(store)

        position = await service.create(PositionCreate(title="Data Engineer", org_id=str(world.org["id"])))
        assert await service.count_open() == 2

        closed = await service.set_status(uuid.UUID(position.id), PositionStatus.CLOSED)

        assert closed.status == PositionStatus.CLOSED
        assert await service.count_open() == 1

    @pytest.mark.asyncio
    async def test_create_for_unknown_org(self, store):
        with pytest.raises(NotFoundError):
            await PositionService(store).create(PositionCreate(title="Data Engineer", org_id=str(uuid.uuid4())))

    @pytest.mark.asyncio
    async def test_create_with_malformed_org(self, store):
        with pytest.raises(InvalidUUIDError):
            await PositionService(store).create(PositionCreate(title="Data Engineer", org_id="nope"))

    @pytest.mark.asyncio
    async def test_list_by_org(self, store, world):
        positions = await PositionService(store).list_by_org(world.other_org["id"])

        assert positions == []


class TestCandidates:

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, store):
        with pytest.raises(ValidationError) as exc_info:
            await CandidateService(store).create(CandidateCreate(full_name="  "))

        assert exc_info.value.field == "full_name"

    @pytest.mark.asyncio
    async def test_update_only_sent_fields(self, store, world):
        service = CandidateService(store)

        updated = await service.update(world.candidate["id"], CandidateUpdate(current_company="Hooli"))

        assert updated.current_company == "Hooli"
        assert updated.current_role == "Senior Developer"
        assert updated.full_name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_update_blank_name_rejected(self, store, world):
        with pytest.raises(ValidationError):
            await CandidateService(store).update(world.candidate["id"], CandidateUpdate(full_name=" "))

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        with pytest.raises(NotFoundError):
            await CandidateService(store).update(uuid.uuid4(), CandidateUpdate(summary="x"))

    @pytest.mark.asyncio
    async def test_search_and_position_count(self, store, world, workflow):
        await CandidateService(store).create(CandidateCreate(full_name="John Smith", current_company="Initech"))
        await workflow.assign_candidate(
            world.candidate["id"], world.position["id"], world.admin["id"], "Ana Admin"
        )

        developers = await CandidateService(store).list_candidates(search="developer")
        everyone = await CandidateService(store).list_candidates()

        assert [(c.full_name, c.position_count) for c in developers] == [("Jane Doe", 1)]
        assert {c.full_name: c.position_count for c in everyone} == {"Jane Doe": 1, "John Smith": 0}

    @pytest.mark.asyncio
    async def test_files(self, store, world):
        service = CandidateService(store)

        await service.add_file(world.candidate["id"], CandidateFileCreate(
            file_url="https://storage.test/cv.pdf", file_name="cv.pdf", file_type="application/pdf"
        ))
        detail = await service.get(world.candidate["id"])

        assert [f.file_name for f in detail.files] == ["cv.pdf"]
        assert detail.full_name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_file_for_missing_candidate(self, store):
        with pytest.raises(NotFoundError):
            await CandidateService(store).add_file(uuid.uuid4(), CandidateFileCreate(
                file_url="https://storage.test/cv.pdf", file_name="cv.pdf", file_type="application/pdf"
            ))
        assert store.candidate_files.rows == {}

"""
Organization and user service - client companies and the people using the platform.
"""
import logging
import uuid
from typing import Optional

from stars.exceptions import NotFoundError, ValidationError, ConflictError
from stars.models import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
    UserCreate,
    UserResponse,
    UserRole,
)
from stars.repositories import PipelineStore

logger = logging.getLogger(__name__)


class OrganizationService:
    """Service for client organization operations."""

    def __init__(self, store: PipelineStore):
        self.store = store

    @staticmethod
    def build_response(row) -> OrganizationResponse:
        return OrganizationResponse(
            id=str(row["id"]),
            name=row["name"],
            logo_url=row["logo_url"],
            primary_color=row["primary_color"],
            created_at=row["created_at"],
        )

    async def create(self, data: OrganizationCreate) -> OrganizationResponse:
        name = data.name.strip()
        if not name:
            raise ValidationError("Organization name cannot be empty", field="name")
        row = await self.store.organizations.create(
            name=name,
            logo_url=data.logo_url,
            primary_color=data.primary_color,
        )
        logger.info(f"Created organization {row['id']} ({name})")
        return self.build_response(row)

    async def get(self, org_id: uuid.UUID) -> OrganizationResponse:
        row = await self.store.organizations.get_by_id(org_id)
        if not row:
            raise NotFoundError("Organization", str(org_id))
        return self.build_response(row)

    async def list_all(self) -> list[OrganizationResponse]:
        rows = await self.store.organizations.list_all()
        return [self.build_response(row) for row in rows]

    async def update_branding(self, org_id: uuid.UUID, data: OrganizationUpdate) -> OrganizationResponse:
        row = await self.store.organizations.update_branding(
            org_id,
            logo_url=data.logo_url,
            primary_color=data.primary_color,
        )
        if not row:
            raise NotFoundError("Organization", str(org_id))
        return self.build_response(row)


class UserService:
    """Service for admin and client user operations."""

    def __init__(self, store: PipelineStore):
        self.store = store

    @staticmethod
    def build_response(row) -> UserResponse:
        return UserResponse(
            id=str(row["id"]),
            email=row["email"],
            name=row["name"],
            role=row["role"],
            org_id=str(row["org_id"]) if row["org_id"] else None,
            is_active=row["is_active"],
            created_at=row["created_at"],
            last_login_at=row["last_login_at"],
        )

    async def create(self, data: UserCreate) -> UserResponse:
        """
        Create a user.

        Admins belong to no organization; clients must belong to an
        existing one.
        """
        org_uuid: Optional[uuid.UUID] = None

        if data.role == UserRole.ADMIN:
            if data.org_id:
                raise ValidationError("Admin users cannot belong to an organization", field="org_id")
        else:
            if not data.org_id:
                raise ValidationError("Client users must belong to an organization", field="org_id")
            try:
                org_uuid = uuid.UUID(data.org_id)
            except ValueError:
                raise ValidationError(f"Invalid organization ID: {data.org_id}", field="org_id")
            if not await self.store.organizations.get_by_id(org_uuid):
                raise NotFoundError("Organization", data.org_id)

        if await self.store.users.get_by_email(data.email):
            raise ConflictError("A user with this email already exists", details={"email": data.email})

        row = await self.store.users.create(
            email=data.email.strip(),
            name=data.name.strip(),
            role=data.role.value,
            org_id=org_uuid,
            supabase_user_id=data.supabase_user_id,
        )
        logger.info(f"Created {data.role.value} user {row['id']} ({data.email})")
        return self.build_response(row)

    async def get(self, user_id: uuid.UUID) -> UserResponse:
        row = await self.store.users.get_by_id(user_id)
        if not row:
            raise NotFoundError("User", str(user_id))
        return self.build_response(row)

    async def list_by_org(self, org_id: uuid.UUID) -> list[UserResponse]:
        rows = await self.store.users.list_by_org(org_id)
        return [self.build_response(row) for row in rows]

    async def list_admins(self) -> list[UserResponse]:
        rows = await self.store.users.list_admins(active_only=False)
        return [self.build_response(row) for row in rows]

    async def set_active(self, user_id: uuid.UUID, is_active: bool) -> UserResponse:
        row = await self.store.users.set_active(user_id, is_active)
        if not row:
            raise NotFoundError("User", str(user_id))
        logger.info(f"User {user_id} {'activated' if is_active else 'deactivated'}")
        return self.build_response(row)

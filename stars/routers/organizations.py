"""
Organization and user endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends

from stars.auth import AuthorizationError, CurrentUser, get_current_user, require_admin
from stars.dependencies import get_organization_service, get_user_service
from stars.exceptions import parse_uuid
from stars.models import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
    UserCreate,
    UserResponse,
    UserActiveUpdate,
)
from stars.services import OrganizationService, UserService

router = APIRouter(tags=["Organizations"])


def ensure_org_access(user: CurrentUser, org_id) -> None:
    """Clients may only see their own organization."""
    if not user.is_admin and user.org_id != org_id:
        raise AuthorizationError("You do not have access to this organization")


@router.get("/organizations", response_model=List[OrganizationResponse])
async def list_organizations(
    user: CurrentUser = Depends(require_admin),
    service: OrganizationService = Depends(get_organization_service),
):
    return await service.list_all()


@router.post("/organizations", response_model=OrganizationResponse, status_code=201)
async def create_organization(
    data: OrganizationCreate,
    user: CurrentUser = Depends(require_admin),
    service: OrganizationService = Depends(get_organization_service),
):
    return await service.create(data)


@router.get("/organizations/{org_id}", response_model=OrganizationResponse)
async def get_organization(
    org_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: OrganizationService = Depends(get_organization_service),
):
    org_uuid = parse_uuid(org_id, field="org_id")
    ensure_org_access(user, org_uuid)
    return await service.get(org_uuid)


@router.patch("/organizations/{org_id}", response_model=OrganizationResponse)
async def update_organization_branding(
    org_id: str,
    data: OrganizationUpdate,
    user: CurrentUser = Depends(require_admin),
    service: OrganizationService = Depends(get_organization_service),
):
    """Update an organization's logo and brand color."""
    return await service.update_branding(parse_uuid(org_id, field="org_id"), data)


@router.get("/organizations/{org_id}/users", response_model=List[UserResponse])
async def list_organization_users(
    org_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    org_uuid = parse_uuid(org_id, field="org_id")
    ensure_org_access(user, org_uuid)
    return await service.list_by_org(org_uuid)


# =============================================================================
# Users
# =============================================================================

@router.get("/users/admins", response_model=List[UserResponse])
async def list_admins(
    user: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return await service.list_admins()


@router.post("/users", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    user: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """
    Provision an admin or client user.

    Admins have no organization; clients must reference an existing one.
    """
    return await service.create(data)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    user: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return await service.get(parse_uuid(user_id, field="user_id"))


@router.patch("/users/{user_id}/active", response_model=UserResponse)
async def set_user_active(
    user_id: str,
    data: UserActiveUpdate,
    user: CurrentUser = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Activate or deactivate a user. Inactive users receive no notifications."""
    return await service.set_active(parse_uuid(user_id, field="user_id"), data.is_active)

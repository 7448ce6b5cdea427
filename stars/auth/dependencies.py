"""
FastAPI authentication dependencies.

Verifies the Supabase access token and maps its subject to a S.T.A.R.S user.
Users are provisioned by admins; a valid token without a matching active
user is rejected.
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header

from stars.auth.exceptions import AuthenticationError, InsufficientRoleError
from stars.auth.jwt import verify_supabase_token, extract_user_id, extract_email
from stars.dependencies import get_store
from stars.models import UserRole
from stars.repositories import PipelineStore

logger = logging.getLogger(__name__)


class CurrentUser:
    """The authenticated S.T.A.R.S user for a request."""

    def __init__(
        self,
        id: UUID,
        email: str,
        name: str,
        role: str,
        org_id: Optional[UUID] = None,
        is_active: bool = True,
    ):
        self.id = id
        self.email = email
        self.name = name
        self.role = role
        self.org_id = org_id
        self.is_active = is_active

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @classmethod
    def from_row(cls, row) -> "CurrentUser":
        return cls(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            role=row["role"],
            org_id=row["org_id"],
            is_active=row["is_active"],
        )


def extract_token(authorization: Optional[str]) -> str:
    """
    Extract the JWT from an Authorization header.

    Raises:
        AuthenticationError: If header is missing or malformed
    """
    if not authorization:
        raise AuthenticationError("Authorization header required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid authorization header format. Use: Bearer <token>")

    return parts[1]


async def get_current_user(
    authorization: Optional[str] = Header(None),
    store: PipelineStore = Depends(get_store),
) -> CurrentUser:
    """
    Get the current authenticated user.

    Looks the user up by Supabase subject, falling back to the token's email
    for users created before their first sign-in.

    Usage:
        @router.get("/protected")
        async def protected_endpoint(user: CurrentUser = Depends(get_current_user)):
            return {"user": user.email}
    """
    token = extract_token(authorization)
    payload = verify_supabase_token(token)

    supabase_user_id = extract_user_id(payload)
    row = await store.users.get_by_supabase_id(supabase_user_id)

    if not row:
        email = extract_email(payload)
        if email:
            row = await store.users.get_by_email(email)

    if not row:
        logger.warning(f"No user for Supabase subject {supabase_user_id}")
        raise AuthenticationError("No account found for this login")

    if not row["is_active"]:
        raise AuthenticationError("User account is deactivated")

    return CurrentUser.from_row(row)


def require_role(*allowed_roles: str):
    """
    Dependency factory that requires one of the given roles.

    Usage:
        @router.post("/organizations")
        async def create_org(user: CurrentUser = Depends(require_role("admin"))):
            ...
    """
    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed_roles:
            raise InsufficientRoleError(
                required_role=", ".join(allowed_roles),
                current_role=user.role,
            )
        return user

    return dependency


require_admin = require_role(UserRole.ADMIN.value)

"""
Organization (client company) and user models.
"""
from datetime import datetime
from typing import Optional
from pydantic import Field

from .common import CamelModel
from .enums import UserRole


class OrganizationCreate(CamelModel):
    """Request model for creating an organization."""
    name: str = Field(..., min_length=1)
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class OrganizationUpdate(CamelModel):
    """Request model for updating organization branding."""
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class OrganizationResponse(CamelModel):
    id: str
    name: str
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    created_at: datetime


class UserCreate(CamelModel):
    """Request model for creating a platform user."""
    email: str = Field(..., min_length=3)
    name: str = Field(..., min_length=1)
    role: UserRole
    org_id: Optional[str] = None
    supabase_user_id: Optional[str] = None


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    role: UserRole
    org_id: Optional[str] = None
    is_active: bool = True
    created_at: datetime
    last_login_at: Optional[datetime] = None


class UserActiveUpdate(CamelModel):
    is_active: bool

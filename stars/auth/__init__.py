"""
Authentication module for the S.T.A.R.S backend.

Supabase JWT verification and role-based authorization.
"""

from stars.auth.config import (
    SUPABASE_URL,
    SUPABASE_ANON_KEY,
    SUPABASE_JWT_SECRET,
)
from stars.auth.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InvalidTokenError,
    TokenExpiredError,
    InsufficientRoleError,
)
from stars.auth.dependencies import (
    CurrentUser,
    get_current_user,
    require_role,
    require_admin,
)

__all__ = [
    # Config
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_JWT_SECRET",
    # Exceptions
    "AuthenticationError",
    "AuthorizationError",
    "InvalidTokenError",
    "TokenExpiredError",
    "InsufficientRoleError",
    # Dependencies
    "CurrentUser",
    "get_current_user",
    "require_role",
    "require_admin",
]

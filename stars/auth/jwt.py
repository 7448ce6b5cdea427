"""
JWT verification utilities for Supabase tokens.

Supports ES256 (current Supabase signing, verified against the project JWKS)
and HS256 (legacy secret, also used for dev tokens).
"""
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError as JWTInvalidTokenError

from stars.auth import config as auth_config
from stars.auth.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

# Cached JWKS client (keys fetched lazily from Supabase)
_jwks_client: Optional[jwt.PyJWKClient] = None


def _get_jwks_client() -> jwt.PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        jwks_url = f"{auth_config.SUPABASE_URL}/auth/v1/.well-known/jwks.json"
        _jwks_client = jwt.PyJWKClient(jwks_url)
    return _jwks_client


def verify_supabase_token(token: str) -> Dict[str, Any]:
    """
    Verify a Supabase JWT and return its payload.

    The algorithm is taken from the token header: HS256 uses
    SUPABASE_JWT_SECRET, anything else goes through JWKS.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTInvalidTokenError:
        raise InvalidTokenError("Malformed token")

    alg = header.get("alg", "HS256")
    if alg == "HS256":
        return _verify_hs256(token)
    return _verify_es256(token)


def _verify_hs256(token: str) -> Dict[str, Any]:
    if not auth_config.SUPABASE_JWT_SECRET:
        raise InvalidTokenError("SUPABASE_JWT_SECRET not configured")

    try:
        return jwt.decode(
            token,
            auth_config.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=auth_config.JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTInvalidTokenError as e:
        logger.warning(f"Invalid HS256 token: {e}")
        raise InvalidTokenError()


def _verify_es256(token: str) -> Dict[str, Any]:
    try:
        signing_key = _get_jwks_client().get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience=auth_config.JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.PyJWKClientError as e:
        logger.error(f"Could not fetch signing key: {e}")
        raise InvalidTokenError("Token verification failed")
    except JWTInvalidTokenError as e:
        logger.warning(f"Invalid ES256 token: {e}")
        raise InvalidTokenError()


def extract_user_id(payload: Dict[str, Any]) -> str:
    """Extract the subject (Supabase auth user ID) from a decoded payload."""
    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Token missing user ID (sub claim)")
    return user_id


def extract_email(payload: Dict[str, Any]) -> Optional[str]:
    return payload.get("email")


def create_dev_token(supabase_user_id: str, email: str, expires_in: int = 3600) -> str:
    """Create a development-only HS256 token."""
    if not auth_config.SUPABASE_JWT_SECRET:
        raise InvalidTokenError("SUPABASE_JWT_SECRET not configured")

    now = datetime.now(timezone.utc)

    return jwt.encode(
        {
            "sub": supabase_user_id,
            "email": email,
            "aud": auth_config.JWT_AUDIENCE,
            "role": "authenticated",
            "iat": int(now.timestamp()),
            "exp": int(now.timestamp() + expires_in),
        },
        auth_config.SUPABASE_JWT_SECRET,
        algorithm="HS256",
    )

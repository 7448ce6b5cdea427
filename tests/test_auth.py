"""
Tests for token verification and user lookup.
"""
import uuid

import pytest

from stars.auth import AuthenticationError, InvalidTokenError, TokenExpiredError, get_current_user
from stars.auth import config as auth_config
from stars.auth.dependencies import extract_token
from stars.auth.jwt import create_dev_token, verify_supabase_token
from stars.models import UserRole

SECRET = "unit-test-secret-with-at-least-32-bytes"


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(auth_config, "SUPABASE_JWT_SECRET", SECRET)


class TestTokens:

    def test_dev_token_round_trip(self):
        subject = str(uuid.uuid4())
        token = create_dev_token(subject, "carla@acme.test")

        payload = verify_supabase_token(token)

        assert payload["sub"] == subject
        assert payload["email"] == "carla@acme.test"

    def test_expired_token(self):
        token = create_dev_token("sub", "a@b.test", expires_in=-60)

        with pytest.raises(TokenExpiredError):
            verify_supabase_token(token)

    def test_wrong_secret(self, monkeypatch):
        token = create_dev_token("sub", "a@b.test")
        monkeypatch.setattr(auth_config, "SUPABASE_JWT_SECRET", "another-secret-that-is-long-enough!!")

        with pytest.raises(InvalidTokenError):
            verify_supabase_token(token)

    def test_garbage_token(self):
        with pytest.raises(InvalidTokenError):
            verify_supabase_token("not-a-jwt")

    @pytest.mark.parametrize("header", [None, "", "Token abc", "Bearer", "Bearer a b"])
    def test_bad_authorization_header(self, header):
        with pytest.raises(AuthenticationError):
            extract_token(header)

    def test_bearer_header(self):
        assert extract_token("Bearer abc.def.ghi") == "abc.def.ghi"


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_lookup_by_supabase_id(self, store):
        row = await store.users.create(
            email="ana@nimble.la", name="Ana Admin", role=UserRole.ADMIN.value, supabase_user_id="sb-1"
        )
        token = create_dev_token("sb-1", "someone-else@nimble.la")

        user = await get_current_user(authorization=f"Bearer {token}", store=store)

        assert user.id == row["id"]
        assert user.is_admin is True

    @pytest.mark.asyncio
    async def test_falls_back_to_email(self, store, world):
        token = create_dev_token("sb-unknown", "carla@acme.test")

        user = await get_current_user(authorization=f"Bearer {token}", store=store)

        assert user.id == world.client["id"]
        assert user.org_id == world.org["id"]
        assert user.is_admin is False

    @pytest.mark.asyncio
    async def test_unknown_user(self, store):
        token = create_dev_token("sb-unknown", "nobody@example.com")

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(authorization=f"Bearer {token}", store=store)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_inactive_user_rejected(self, store, world):
        await store.users.set_active(world.second_client["id"], False)
        token = create_dev_token("sb-unknown", "dan@acme.test")

        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(authorization=f"Bearer {token}", store=store)

        assert exc_info.value.message == "User account is deactivated"

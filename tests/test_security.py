"""
Security Tests
==============

Tests for access token verification and the bearer-token dependency.
"""

from datetime import timedelta
import uuid

import pytest
from httpx import AsyncClient
from jose import jwt

from lifeos.config import settings
from lifeos.core.security import JWT_ALGORITHM, create_access_token, decode_token
from tests.conftest import USER_ID


class TestDecodeToken:
    """Tests for decode_token"""

    def test_valid_token(self):
        token = create_access_token(USER_ID, email="tester@example.com")

        payload = decode_token(token)

        assert payload["sub"] == str(USER_ID)
        assert payload["email"] == "tester@example.com"
        assert payload["aud"] == "authenticated"

    def test_expired_token(self):
        token = create_access_token(USER_ID, expires_delta=timedelta(seconds=-30))

        assert decode_token(token) is None

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": str(USER_ID), "aud": settings.SUPABASE_JWT_AUDIENCE},
            "x" * 40,
            algorithm=JWT_ALGORITHM,
        )

        assert decode_token(token) is None

    def test_wrong_audience(self):
        token = jwt.encode(
            {"sub": str(USER_ID), "aud": "anon"},
            settings.SUPABASE_JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

        assert decode_token(token) is None

    def test_garbage(self):
        assert decode_token("not-a-jwt") is None


class TestBearerDependency:
    """Tests for get_current_user over HTTP"""

    @pytest.mark.asyncio
    async def test_valid_token_is_accepted(self, anonymous_client: AsyncClient):
        token = create_access_token(uuid.uuid4())

        response = await anonymous_client.get(
            "/api/v1/tasks",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_token_is_rejected(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get(
            "/api/v1/tasks",
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_002"

    @pytest.mark.asyncio
    async def test_token_without_uuid_subject(self, anonymous_client: AsyncClient):
        token = jwt.encode(
            {"sub": "service-role", "aud": settings.SUPABASE_JWT_AUDIENCE},
            settings.SUPABASE_JWT_SECRET,
            algorithm=JWT_ALGORITHM,
        )

        response = await anonymous_client.get(
            "/api/v1/tasks",
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 401

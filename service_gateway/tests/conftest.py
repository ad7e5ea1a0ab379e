"""
Shared fixtures for Gateway tests.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from service_gateway.app.adapters import BuilderSigner, ClobClient, CommentsClient, GammaClient, SupabaseAuthClient
from service_gateway.app.main import GatewayService
from service_gateway.app.models import Identity
from shared.config import GatewaySettings

# urlsafe base64 of "secret-key-for-tests"
BUILDER_SECRET = "c2VjcmV0LWtleS1mb3ItdGVzdHM="

TEST_ENV = {
    "environment": "test",
    "supabase_url": "https://auth.example.test",
    "supabase_anon_key": "anon-key",
    "supabase_service_role_key": "service-role-key",
    "polymarket_api_url": "https://gamma.example.test",
    "polymarket_clob_api_url": "https://clob.example.test",
    "allowed_origins": "http://localhost:3000",
}


@pytest.fixture
def test_env():
    return dict(TEST_ENV)


@pytest.fixture
def builder_secret():
    return BUILDER_SECRET


@pytest.fixture
def settings(test_env):
    """Settings that never read a .env file."""
    return GatewaySettings(_env_file=None, **test_env)


@pytest.fixture
def identity():
    return Identity(
        id="user-123",
        email="trader@example.com",
        created_at="2024-01-01T00:00:00Z",
        last_sign_in_at="2024-06-01T12:00:00Z",
    )


@pytest.fixture
def auth_client(identity):
    client = AsyncMock(spec=SupabaseAuthClient)
    client.get_user.return_value = identity
    return client


@pytest.fixture
def gamma_client():
    return AsyncMock(spec=GammaClient)


@pytest.fixture
def clob_client():
    return AsyncMock(spec=ClobClient)


@pytest.fixture
def comments_client():
    return AsyncMock(spec=CommentsClient)


@pytest.fixture
def builder_signer():
    return BuilderSigner("builder-key", BUILDER_SECRET, "builder-passphrase")


@pytest.fixture
def gateway_service(settings, auth_client, gamma_client, clob_client, comments_client, builder_signer):
    """GatewayService with every upstream replaced by a mock."""
    return GatewayService(
        settings,
        auth_client=auth_client,
        gamma_client=gamma_client,
        clob_client=clob_client,
        comments_client=comments_client,
        builder_signer=builder_signer,
    )


@pytest.fixture
def client(gateway_service):
    return TestClient(gateway_service.app)


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer user-access-token"}

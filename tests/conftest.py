"""
Global test fixtures for the auth bridge.

This module provides shared fixtures for all tests including:
- Test settings with a fake user pool and Discord application
- Discord identity factories
- FastAPI test clients
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def test_settings():
    """Settings pointing at a fake pool and Discord application."""
    from authbridge.config import Settings

    return Settings(
        aws_region="us-east-1",
        user_pool_id="us-east-1_TestPool",
        cognito_client_id="testclientid",
        cognito_client_secret=None,
        discord_client_id="discord-client-id",
        discord_client_secret="discord-client-secret",
        discord_redirect_uri="http://localhost:8000/callback",
        discord_api_base="https://discord.test/api/v10",
        password_length=15,
        directory_timeout_seconds=5.0,
    )


@pytest.fixture
def directory_config(test_settings):
    """Pool configuration without a client secret."""
    return test_settings.directory_config()


@pytest.fixture
def secret_directory_config():
    """Pool configuration for an app client registered with a secret."""
    from authbridge.config import DirectoryConfig

    return DirectoryConfig(
        region="us-east-1",
        user_pool_id="us-east-1_TestPool",
        client_id="testclientid",
        client_secret="testclientsecret",
    )


# =============================================================================
# Discord Identity Fixtures
# =============================================================================

@pytest.fixture
def discord_user() -> dict:
    """A Discord account as returned after the OAuth flow."""
    return {
        "discordId": "u1",
        "discordUsername": "Alice",
        "discordEmail": "a@x.com",
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    Create FastAPI app for testing.

    Note: This imports the actual app; dependencies are overridden per test.
    """
    from authbridge.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Use this for synchronous endpoint testing.
    """
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def async_client(app):
    """
    Create an async test client.

    Use this for testing async endpoints.
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

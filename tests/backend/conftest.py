"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with the in-memory identity
directory, a lifecycle manager over it, and dependency overrides for routes.
"""

import sys
from pathlib import Path

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import InMemoryDirectory  # noqa: E402


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def directory() -> InMemoryDirectory:
    """Empty in-memory user pool."""
    return InMemoryDirectory()


@pytest.fixture
def manager(directory):
    """CredentialLifecycleManager over the in-memory pool."""
    from authbridge.services.lifecycle import CredentialLifecycleManager

    return CredentialLifecycleManager(directory)


@pytest.fixture
def secret_manager(directory, secret_directory_config):
    """Manager for an app client registered with a secret."""
    from authbridge.services.lifecycle import CredentialLifecycleManager

    return CredentialLifecycleManager(directory, config=secret_directory_config)


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest.fixture
def client_with_directory(app, directory, test_settings):
    """
    TestClient whose routes use the in-memory pool and test settings.

    Usage in tests:
        def test_something(client_with_directory, directory):
            directory.add_user("u1")
            response = client_with_directory.post(...)
    """
    from fastapi.testclient import TestClient

    from authbridge.config import get_settings
    from authbridge.dependencies.directory import get_directory

    async def _directory():
        return directory

    app.dependency_overrides[get_directory] = _directory
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as c:
        yield c


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, message_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert "detail" in data
        assert data["detail"]["status"] == "error"
        if message_contains:
            assert message_contains.lower() in data["detail"]["message"].lower()
    return _assert

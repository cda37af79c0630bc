"""
Tests for health check and root endpoints.
"""

import pytest


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_endpoint_returns_200_when_api_running(self, client):
        """Basic health check should return 200 if API is up."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_health_does_not_touch_user_pool(self, client):
        """Liveness must not depend on the user pool being reachable."""
        from authbridge.dependencies import directory as directory_deps

        client.get("/health")

        assert directory_deps._directory is None

    @pytest.mark.asyncio
    async def test_health_endpoint_async(self, async_client):
        """Health check over the ASGI transport."""
        response = await async_client.get("/health")

        assert response.status_code == 200


class TestRootEndpoint:
    """Tests for GET / endpoint."""

    def test_root_lists_api_information(self, client):
        """Root endpoint points at docs and health."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Auth Bridge API"
        assert data["health"] == "/health"

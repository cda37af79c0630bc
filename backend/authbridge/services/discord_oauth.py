"""
Discord OAuth2 client for exchanging authorization codes.

The client trades the code the Discord consent screen hands back for an
OAuth access token (https://discord.com/developers/docs/topics/oauth2).
"""
import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from authbridge.config import Settings, get_settings

logger = logging.getLogger(__name__)


class DiscordOAuthError(Exception):
    """Raised when Discord refuses or fails a code exchange."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DiscordToken(BaseModel):
    """Token response returned by Discord's token endpoint."""
    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str
    scope: str


class DiscordOAuthClient:
    """
    Async client for the Discord OAuth2 token endpoint.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Discord OAuth client."""
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=30.0,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def exchange_code(self, code: str) -> DiscordToken:
        """
        Exchange an authorization code for an OAuth access token.

        Args:
            code: Authorization code from the Discord redirect

        Returns:
            DiscordToken with access and refresh tokens

        Raises:
            DiscordOAuthError: If Discord rejects the code or is unreachable
        """
        client = await self._get_client()

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.settings.discord_redirect_uri,
        }
        auth = (
            self.settings.discord_client_id,
            self.settings.discord_client_secret.get_secret_value(),
        )

        try:
            response = await client.post(
                f"{self.settings.discord_api_base}/oauth2/token",
                data=data,
                auth=auth,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Discord rejected code exchange: HTTP {e.response.status_code}")
            raise DiscordOAuthError(
                f"discord returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Error reaching Discord token endpoint: {e}")
            raise DiscordOAuthError("discord token endpoint unreachable") from e

        return DiscordToken(**response.json())


# Singleton instance
_discord_client: Optional[DiscordOAuthClient] = None


async def get_discord_client() -> DiscordOAuthClient:
    """Get or create the shared Discord OAuth client."""
    global _discord_client
    if _discord_client is None:
        _discord_client = DiscordOAuthClient()
    return _discord_client


async def close_discord_client() -> None:
    """Close the shared Discord OAuth client."""
    global _discord_client
    if _discord_client is not None:
        await _discord_client.close()
        _discord_client = None

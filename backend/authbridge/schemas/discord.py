"""
Discord OAuth request schemas.
"""
from pydantic import BaseModel, Field


class DiscordOAuthRequest(BaseModel):
    """Authorization code returned by the Discord consent screen."""
    code: str = Field(default="", description="OAuth authorization code")

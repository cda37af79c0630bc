"""
Identity and session models exchanged with the user pool.
"""
from typing import Optional

from pydantic import BaseModel, Field, SecretStr


# Custom attributes defined on the user pool
DISCORD_ID_ATTRIBUTE = "custom:discord_id"
DISCORD_USERNAME_ATTRIBUTE = "custom:discord_username"
EMAIL_ATTRIBUTE = "email"
SUBJECT_ATTRIBUTE = "sub"


class ExternalIdentity(BaseModel):
    """
    A user pool account keyed by a Discord id.

    Owned by the identity directory; the bridge only reads it for the
    duration of a request.
    """
    principal_id: str = Field(..., description="Discord id, used as the pool username")
    email: Optional[str] = Field(None, description="Email address from Discord")
    display_name: Optional[str] = Field(None, description="Discord username")
    enabled: bool = Field(default=True, description="Whether the account is enabled")
    provider_subject_id: Optional[str] = Field(
        None,
        description="Subject ('sub') assigned by the user pool",
    )

    @classmethod
    def from_attributes(
        cls,
        principal_id: str,
        attributes: dict[str, str],
        enabled: bool = True,
    ) -> "ExternalIdentity":
        """Build an identity from a flat pool attribute mapping."""
        return cls(
            principal_id=principal_id,
            email=attributes.get(EMAIL_ATTRIBUTE),
            display_name=attributes.get(DISCORD_USERNAME_ATTRIBUTE),
            enabled=enabled,
            provider_subject_id=attributes.get(SUBJECT_ATTRIBUTE),
        )


class SessionCredential(BaseModel):
    """
    Tokens issued by the user pool.

    Both tokens are SecretStr so they never render in logs or reprs. They
    are forwarded to the caller once and never persisted.
    """
    access_token: SecretStr = Field(..., description="Short-lived access token")
    refresh_token: Optional[SecretStr] = Field(
        None,
        description="Long-lived refresh token (absent on token refresh)",
    )
    expires_in_seconds: int = Field(..., description="Access token lifetime in seconds")

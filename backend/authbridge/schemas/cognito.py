"""
User pool request/response schemas.

Field aliases keep the camelCase wire format the game client already speaks.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from authbridge.models.identity import ExternalIdentity, SessionCredential


class CamelModel(BaseModel):
    """Base model accepting both field names and camelCase aliases."""
    model_config = ConfigDict(populate_by_name=True)


class CreateUserRequest(CamelModel):
    """Create-user request sent after the Discord OAuth flow completes."""
    discord_id: str = Field(..., alias="discordId", min_length=1, description="Discord user id")
    discord_username: str = Field(..., alias="discordUsername", description="Discord username")
    discord_email: EmailStr = Field(..., alias="discordEmail", description="Discord email")


class AuthRequest(CamelModel):
    """Token refresh request."""
    discord_id: str = Field(..., alias="discordId", min_length=1, description="Discord user id")
    refresh_token: str = Field(..., alias="refreshToken", min_length=1, description="Refresh token")


class UserExistsRequest(CamelModel):
    """User existence check request."""
    discord_id: str = Field(..., alias="discordId", min_length=1, description="Discord user id")


class UserStatusRequest(CamelModel):
    """Enable or disable a user."""
    discord_id: str = Field(..., alias="discordId", min_length=1, description="Discord user id")
    account_enabled: bool = Field(..., alias="accountEnabled", description="Target status")


class CredentialsResponse(CamelModel):
    """Session tokens as handed to the client."""
    access_token: str = Field(..., alias="accessToken")
    refresh_token: Optional[str] = Field(None, alias="refreshToken")
    token_expiration: int = Field(..., alias="tokenExpiration")

    @classmethod
    def from_credential(cls, credential: SessionCredential) -> "CredentialsResponse":
        refresh = credential.refresh_token
        return cls(
            access_token=credential.access_token.get_secret_value(),
            refresh_token=refresh.get_secret_value() if refresh else None,
            token_expiration=credential.expires_in_seconds,
        )


class CognitoUserResponse(CamelModel):
    """Pool user with freshly issued credentials."""
    discord_id: str = Field(..., alias="discordId")
    discord_username: Optional[str] = Field(None, alias="discordUsername")
    email: Optional[str] = None
    account_enabled: bool = Field(..., alias="accountEnabled")
    credentials: CredentialsResponse


class AuthResponse(CamelModel):
    """Token refresh response."""
    access_token: str = Field(..., alias="accessToken")
    token_expiration: int = Field(..., alias="tokenExpiration")
    account_enabled: Optional[bool] = Field(None, alias="accountEnabled")


class UserResponse(CamelModel):
    """Pool user attributes."""
    discord_id: str = Field(..., alias="discordId")
    discord_username: Optional[str] = Field(None, alias="discordUsername")
    email: Optional[str] = None
    account_enabled: bool = Field(..., alias="accountEnabled")
    cognito_id: Optional[str] = Field(None, alias="cognitoId")

    @classmethod
    def from_identity(cls, identity: ExternalIdentity) -> "UserResponse":
        return cls(
            discord_id=identity.principal_id,
            discord_username=identity.display_name,
            email=identity.email,
            account_enabled=identity.enabled,
            cognito_id=identity.provider_subject_id,
        )


class UserExistsResponse(CamelModel):
    """User existence check response."""
    user_exists: bool = Field(..., alias="userExists")
    user_enabled: bool = Field(..., alias="userEnabled")


class UserStatusResponse(CamelModel):
    """User status change response."""
    account_enabled: bool = Field(..., alias="accountEnabled")


class ErrorResponse(BaseModel):
    """Structured error body for rejected or failed operations."""
    message: str = Field(..., description="Human readable error")
    status: str = Field(default="error", description="Always 'error'")
    step: Optional[str] = Field(None, description="Failed step for partial operations")

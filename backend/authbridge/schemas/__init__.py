"""
Request and response schemas for API endpoints.
"""
from authbridge.schemas.cognito import (
    AuthRequest,
    AuthResponse,
    CognitoUserResponse,
    CreateUserRequest,
    CredentialsResponse,
    ErrorResponse,
    UserExistsRequest,
    UserExistsResponse,
    UserResponse,
    UserStatusRequest,
    UserStatusResponse,
)
from authbridge.schemas.discord import DiscordOAuthRequest

__all__ = [
    # Cognito
    "AuthRequest",
    "AuthResponse",
    "CognitoUserResponse",
    "CreateUserRequest",
    "CredentialsResponse",
    "ErrorResponse",
    "UserExistsRequest",
    "UserExistsResponse",
    "UserResponse",
    "UserStatusRequest",
    "UserStatusResponse",
    # Discord
    "DiscordOAuthRequest",
]

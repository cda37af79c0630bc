"""
Service layer for business logic.
"""
from authbridge.services.cognito import CognitoDirectory
from authbridge.services.directory import IdentityDirectory
from authbridge.services.discord_oauth import DiscordOAuthClient
from authbridge.services.lifecycle import CredentialLifecycleManager

__all__ = [
    "CognitoDirectory",
    "IdentityDirectory",
    "DiscordOAuthClient",
    "CredentialLifecycleManager",
]

"""
Dependencies wiring the identity directory into routes.
"""
from typing import Annotated, Optional

from fastapi import Depends

from authbridge.config import Settings, get_settings
from authbridge.core.context import OperationContext
from authbridge.services.cognito import CognitoDirectory
from authbridge.services.directory import IdentityDirectory
from authbridge.services.lifecycle import CredentialLifecycleManager

# Global directory instance, the boto3 client is reused across requests
_directory: Optional[IdentityDirectory] = None


async def get_directory() -> IdentityDirectory:
    """Get or create the Cognito-backed identity directory."""
    global _directory
    if _directory is None:
        _directory = CognitoDirectory(get_settings().directory_config())
    return _directory


async def get_lifecycle_manager(
    directory: Annotated[IdentityDirectory, Depends(get_directory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CredentialLifecycleManager:
    """Dependency to get a CredentialLifecycleManager over the directory."""
    return CredentialLifecycleManager(
        directory,
        config=settings.directory_config(),
        password_length=settings.password_length,
    )


async def get_operation_context(
    settings: Annotated[Settings, Depends(get_settings)],
) -> OperationContext:
    """Per-request deadline for directory calls."""
    return OperationContext(timeout=settings.directory_timeout_seconds)


def reset_directory() -> None:
    """Drop the cached directory so the next request rebuilds it."""
    global _directory
    _directory = None


# Type aliases for cleaner route signatures
Directory = Annotated[IdentityDirectory, Depends(get_directory)]
LifecycleManager = Annotated[CredentialLifecycleManager, Depends(get_lifecycle_manager)]
RequestContext = Annotated[OperationContext, Depends(get_operation_context)]

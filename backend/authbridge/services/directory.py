"""
Identity directory interface.

The lifecycle manager depends on this abstraction rather than on an SDK
client, so the user pool can be swapped for an in-memory fake in tests.
"""
from abc import ABC, abstractmethod
from typing import Optional

from authbridge.models.identity import ExternalIdentity, SessionCredential


class IdentityDirectory(ABC):
    """
    Admin API of a remote user pool.

    Implementations raise DirectoryUnavailable for transient failures and
    DirectoryRejected when credentials are refused. They never retry.
    """

    @abstractmethod
    async def find_user(self, principal_id: str) -> Optional[ExternalIdentity]:
        """Return the identity for ``principal_id`` or None if it does not exist."""

    @abstractmethod
    async def create_user(
        self,
        principal_id: str,
        attributes: dict[str, str],
        temporary_password: str,
        suppress_notification: bool = True,
    ) -> Optional[str]:
        """Create a user with a temporary password. Returns the subject id, if known."""

    @abstractmethod
    async def set_password(
        self,
        principal_id: str,
        password: str,
        permanent: bool = True,
    ) -> None:
        """
        Replace the user's password, invalidating the previous one.

        Raises:
            SessionRevocationFailed: If the password was replaced but refresh
                tokens issued before it could not be revoked
        """

    @abstractmethod
    async def authenticate_with_password(
        self,
        principal_id: str,
        password: str,
    ) -> SessionCredential:
        """Start a session with a username/password pair."""

    @abstractmethod
    async def authenticate_with_token(
        self,
        principal_id: str,
        long_lived_token: str,
        integrity_tag: Optional[str] = None,
    ) -> SessionCredential:
        """Exchange a refresh token for a new access token."""

    @abstractmethod
    async def enable_user(self, principal_id: str) -> bool:
        """Enable the account. Returns False if the directory refused."""

    @abstractmethod
    async def disable_user(self, principal_id: str) -> bool:
        """Disable the account. Returns False if the directory refused."""

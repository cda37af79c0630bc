"""
In-memory identity directory for tests.

Models the user pool state transitions the lifecycle manager relies on:
users, their current password, and the refresh tokens issued to them.
Setting a password revokes every refresh token issued before it.
"""
import uuid
from typing import Callable, Optional

from authbridge.core.errors import (
    DirectoryRejected,
    DirectoryUnavailable,
    UserAlreadyExists,
)
from authbridge.models.identity import ExternalIdentity, SessionCredential
from authbridge.services.directory import IdentityDirectory

MUTATING_CALLS = {"create_user", "set_password", "enable_user", "disable_user"}


class InMemoryDirectory(IdentityDirectory):
    """Fake user pool that records every call in order."""

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.calls: list[str] = []
        self.integrity_tags: list[Optional[str]] = []
        # method name -> exception raised instead of performing the call.
        # "revoke_sessions" fails set_password after the password changed.
        self.failures: dict[str, Exception] = {}
        # invoked with the method name after a call succeeds
        self.after_call: Optional[Callable[[str], None]] = None

    # ==================== Helpers ====================

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def _exit(self, name: str) -> None:
        if self.after_call is not None:
            self.after_call(name)

    @property
    def mutating_calls(self) -> list[str]:
        return [name for name in self.calls if name in MUTATING_CALLS]

    def add_user(
        self,
        principal_id: str,
        password: str = "Existing-Passw0rd!",
        enabled: bool = True,
        email: str = "existing@example.com",
        display_name: str = "existing",
    ) -> str:
        """Seed a confirmed user and return a refresh token issued to it."""
        self.users[principal_id] = {
            "attributes": {
                "email": email,
                "custom:discord_id": principal_id,
                "custom:discord_username": display_name,
            },
            "password": password,
            "permanent": True,
            "enabled": enabled,
            "sub": str(uuid.uuid4()),
        }
        return self._issue_refresh_token(principal_id)

    def _issue_refresh_token(self, principal_id: str) -> str:
        token = f"refresh-{uuid.uuid4().hex}"
        self.refresh_tokens[token] = principal_id
        return token

    # ==================== IdentityDirectory ====================

    async def find_user(self, principal_id: str) -> Optional[ExternalIdentity]:
        self._enter("find_user")
        user = self.users.get(principal_id)
        self._exit("find_user")
        if user is None:
            return None
        return ExternalIdentity.from_attributes(
            principal_id,
            {**user["attributes"], "sub": user["sub"]},
            enabled=user["enabled"],
        )

    async def create_user(
        self,
        principal_id: str,
        attributes: dict[str, str],
        temporary_password: str,
        suppress_notification: bool = True,
    ) -> Optional[str]:
        self._enter("create_user")
        if principal_id in self.users:
            raise UserAlreadyExists("user exists", "create_user", principal_id)
        self.users[principal_id] = {
            "attributes": dict(attributes),
            "password": temporary_password,
            "permanent": False,
            "enabled": True,
            "sub": str(uuid.uuid4()),
            "notified": not suppress_notification,
        }
        self._exit("create_user")
        return self.users[principal_id]["sub"]

    async def set_password(
        self,
        principal_id: str,
        password: str,
        permanent: bool = True,
    ) -> None:
        self._enter("set_password")
        user = self.users.get(principal_id)
        if user is None:
            raise DirectoryUnavailable("user not found", "set_password", principal_id)
        user["password"] = password
        user["permanent"] = permanent
        if "revoke_sessions" in self.failures:
            raise self.failures["revoke_sessions"]
        self.refresh_tokens = {
            token: owner
            for token, owner in self.refresh_tokens.items()
            if owner != principal_id
        }
        self._exit("set_password")

    async def authenticate_with_password(
        self,
        principal_id: str,
        password: str,
    ) -> SessionCredential:
        self._enter("authenticate_with_password")
        user = self.users.get(principal_id)
        if user is None or user["password"] != password or not user["permanent"]:
            raise DirectoryRejected("incorrect username or password",
                                    "authenticate_with_password", principal_id)
        credential = SessionCredential(
            access_token=f"access-{uuid.uuid4().hex}",
            refresh_token=self._issue_refresh_token(principal_id),
            expires_in_seconds=3600,
        )
        self._exit("authenticate_with_password")
        return credential

    async def authenticate_with_token(
        self,
        principal_id: str,
        long_lived_token: str,
        integrity_tag: Optional[str] = None,
    ) -> SessionCredential:
        self._enter("authenticate_with_token")
        self.integrity_tags.append(integrity_tag)
        if self.refresh_tokens.get(long_lived_token) != principal_id:
            raise DirectoryRejected("invalid refresh token",
                                    "authenticate_with_token", principal_id)
        credential = SessionCredential(
            access_token=f"access-{uuid.uuid4().hex}",
            expires_in_seconds=3600,
        )
        self._exit("authenticate_with_token")
        return credential

    async def enable_user(self, principal_id: str) -> bool:
        self._enter("enable_user")
        user = self.users.get(principal_id)
        if user is None:
            return False
        user["enabled"] = True
        self._exit("enable_user")
        return True

    async def disable_user(self, principal_id: str) -> bool:
        self._enter("disable_user")
        user = self.users.get(principal_id)
        if user is None:
            return False
        user["enabled"] = False
        self._exit("disable_user")
        return True

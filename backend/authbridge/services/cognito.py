"""
AWS Cognito user pool implementation of IdentityDirectory.

boto3 is blocking, so every SDK call runs in a worker thread. Errors are
mapped onto the bridge taxonomy; nothing is retried here.
"""
import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from authbridge.config import DirectoryConfig
from authbridge.core.errors import (
    DirectoryError,
    DirectoryRejected,
    DirectoryUnavailable,
    SessionRevocationFailed,
    UserAlreadyExists,
)
from authbridge.core import security
from authbridge.models.identity import ExternalIdentity, SessionCredential
from authbridge.services.directory import IdentityDirectory

logger = logging.getLogger(__name__)

# Error codes meaning the credentials were refused rather than the pool failing
REJECTION_CODES = {
    "NotAuthorizedException",
    "UserNotFoundException",
    "PasswordResetRequiredException",
    "UserNotConfirmedException",
}


class CognitoDirectory(IdentityDirectory):
    """
    Cognito admin API wrapper keyed by Discord id as the pool username.

    Args:
        config: User pool id, app client credentials and region
        client: Preconfigured ``cognito-idp`` client (tests pass a stubbed one)
    """

    def __init__(self, config: DirectoryConfig, client: Any = None):
        self.config = config
        if client is None:
            client_kwargs: dict[str, Any] = {
                "region_name": config.region,
                "config": Config(
                    connect_timeout=config.timeout_seconds,
                    read_timeout=config.timeout_seconds,
                    retries={"max_attempts": 1},
                ),
            }
            if config.endpoint_url:
                client_kwargs["endpoint_url"] = config.endpoint_url
            client = boto3.client("cognito-idp", **client_kwargs)
        self._client = client

    async def _call(self, operation: str, principal_id: str, method: str, **params) -> dict:
        """Run one SDK call in a thread, mapping failures to DirectoryUnavailable."""
        try:
            return await asyncio.to_thread(getattr(self._client, method), **params)
        except ClientError as e:
            code = _error_code(e)
            if code in REJECTION_CODES:
                raise DirectoryRejected(f"{method} refused: {code}", operation, principal_id) from e
            if code == "UsernameExistsException":
                raise UserAlreadyExists(f"{method} refused: {code}", operation, principal_id) from e
            logger.error(f"Cognito {method} failed for principal {principal_id}: {code}")
            raise DirectoryUnavailable(f"{method} failed: {code}", operation, principal_id) from e
        except BotoCoreError as e:
            logger.error(f"Cognito {method} unreachable for principal {principal_id}: {e}")
            raise DirectoryUnavailable(f"{method} unreachable", operation, principal_id) from e

    def _secret_hash(self, principal_id: str) -> Optional[str]:
        return security.integrity_tag(
            principal_id, self.config.client_id, self.config.client_secret
        )

    # ==================== User Management ====================

    async def find_user(self, principal_id: str) -> Optional[ExternalIdentity]:
        """Look up a user by Discord id."""
        logger.info(f"Checking user pool for principal {principal_id}")
        try:
            response = await self._call(
                "find_user", principal_id, "admin_get_user",
                UserPoolId=self.config.user_pool_id,
                Username=principal_id,
            )
        except DirectoryRejected as e:
            if _error_code(e.__cause__) == "UserNotFoundException":
                logger.info(f"Principal {principal_id} not found in user pool")
                return None
            raise DirectoryUnavailable(str(e), "find_user", principal_id) from e

        attributes = {
            attr["Name"]: attr["Value"] for attr in response.get("UserAttributes", [])
        }
        return ExternalIdentity.from_attributes(
            principal_id,
            attributes,
            enabled=response.get("Enabled", True),
        )

    async def create_user(
        self,
        principal_id: str,
        attributes: dict[str, str],
        temporary_password: str,
        suppress_notification: bool = True,
    ) -> Optional[str]:
        """Create a user with a temporary password and no welcome message."""
        params: dict[str, Any] = {
            "UserPoolId": self.config.user_pool_id,
            "Username": principal_id,
            "UserAttributes": [
                {"Name": name, "Value": value} for name, value in attributes.items()
            ],
            "TemporaryPassword": temporary_password,
        }
        if suppress_notification:
            params["MessageAction"] = "SUPPRESS"
        try:
            response = await self._call("create_user", principal_id, "admin_create_user", **params)
        except DirectoryRejected as e:
            raise DirectoryUnavailable(str(e), "create_user", principal_id) from e

        created = response.get("User", {}).get("Attributes", [])
        return next((attr["Value"] for attr in created if attr["Name"] == "sub"), None)

    async def set_password(
        self,
        principal_id: str,
        password: str,
        permanent: bool = True,
    ) -> None:
        """
        Set the user's password and revoke previously issued refresh tokens.

        Setting a password does not invalidate existing refresh tokens in
        Cognito, so a global sign-out follows. If only the sign-out fails,
        the new password is already in place and SessionRevocationFailed is
        raised so callers can tell the two apart.
        """
        try:
            await self._call(
                "set_password", principal_id, "admin_set_user_password",
                UserPoolId=self.config.user_pool_id,
                Username=principal_id,
                Password=password,
                Permanent=permanent,
            )
        except DirectoryRejected as e:
            raise DirectoryUnavailable(str(e), "set_password", principal_id) from e

        try:
            await self._call(
                "revoke_sessions", principal_id, "admin_user_global_sign_out",
                UserPoolId=self.config.user_pool_id,
                Username=principal_id,
            )
        except DirectoryError as e:
            logger.error(f"Password replaced but sessions not revoked for principal {principal_id}")
            raise SessionRevocationFailed(str(e), "revoke_sessions", principal_id) from e

    async def enable_user(self, principal_id: str) -> bool:
        return await self._toggle(principal_id, "enable_user", "admin_enable_user")

    async def disable_user(self, principal_id: str) -> bool:
        return await self._toggle(principal_id, "disable_user", "admin_disable_user")

    async def _toggle(self, principal_id: str, operation: str, method: str) -> bool:
        try:
            await self._call(
                operation, principal_id, method,
                UserPoolId=self.config.user_pool_id,
                Username=principal_id,
            )
        except DirectoryRejected:
            logger.warning(f"Cognito refused {method} for principal {principal_id}")
            return False
        logger.info(f"{method} succeeded for principal {principal_id}")
        return True

    # ==================== Authentication Flows ====================

    async def authenticate_with_password(
        self,
        principal_id: str,
        password: str,
    ) -> SessionCredential:
        """Admin username/password auth used right after a password is set."""
        auth_params = {"USERNAME": principal_id, "PASSWORD": password}
        secret_hash = self._secret_hash(principal_id)
        if secret_hash:
            auth_params["SECRET_HASH"] = secret_hash

        response = await self._call(
            "authenticate_with_password", principal_id, "admin_initiate_auth",
            UserPoolId=self.config.user_pool_id,
            ClientId=self.config.client_id,
            AuthFlow="ADMIN_USER_PASSWORD_AUTH",
            AuthParameters=auth_params,
        )
        return self._credential(response, principal_id, "authenticate_with_password")

    async def authenticate_with_token(
        self,
        principal_id: str,
        long_lived_token: str,
        integrity_tag: Optional[str] = None,
    ) -> SessionCredential:
        """Refresh token auth. Cognito does not return a new refresh token here."""
        auth_params = {"REFRESH_TOKEN": long_lived_token}
        tag = integrity_tag or self._secret_hash(principal_id)
        if tag:
            auth_params["SECRET_HASH"] = tag

        response = await self._call(
            "authenticate_with_token", principal_id, "admin_initiate_auth",
            UserPoolId=self.config.user_pool_id,
            ClientId=self.config.client_id,
            AuthFlow="REFRESH_TOKEN_AUTH",
            AuthParameters=auth_params,
        )
        return self._credential(response, principal_id, "authenticate_with_token")

    @staticmethod
    def _credential(response: dict, principal_id: str, operation: str) -> SessionCredential:
        result = response.get("AuthenticationResult")
        if not result:
            # A challenge means the account is not in a usable state for admin auth
            challenge = response.get("ChallengeName", "unknown")
            raise DirectoryRejected(
                f"unexpected auth challenge: {challenge}", operation, principal_id
            )
        return SessionCredential(
            access_token=result["AccessToken"],
            refresh_token=result.get("RefreshToken"),
            expires_in_seconds=result.get("ExpiresIn", 3600),
        )


def _error_code(error: Optional[BaseException]) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "")
    return ""

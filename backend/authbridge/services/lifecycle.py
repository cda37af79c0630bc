"""
Credential lifecycle service: provision, authenticate, and rotate.

The user pool only issues tokens against a password, while our users only
ever authenticate through Discord. Each operation therefore synthesizes a
throwaway password, sets it, uses it once to obtain tokens, and forgets it.
No password is ever stored.
"""
import logging
from typing import Optional

from authbridge.config import DirectoryConfig
from authbridge.core.context import OperationContext
from authbridge.core.errors import (
    DirectoryError,
    DirectoryRejected,
    InconsistentState,
    OperationCancelled,
    SessionRevocationFailed,
    UserAlreadyExists,
)
from authbridge.core.passwords import PasswordPolicy, PasswordSynthesizer
from authbridge.core.security import integrity_tag
from authbridge.models.identity import (
    DISCORD_ID_ATTRIBUTE,
    DISCORD_USERNAME_ATTRIBUTE,
    EMAIL_ATTRIBUTE,
    ExternalIdentity,
)
from authbridge.models.outcome import (
    REASON_ALREADY_EXISTS,
    REASON_UNAUTHENTICATED,
    Authenticated,
    Failed,
    LifecycleOutcome,
    Provisioned,
    Rejected,
    Rotated,
)
from authbridge.services.directory import IdentityDirectory

logger = logging.getLogger(__name__)


class CredentialLifecycleManager:
    """Service for user pool credential operations."""

    def __init__(
        self,
        directory: IdentityDirectory,
        config: Optional[DirectoryConfig] = None,
        synthesizer: Optional[PasswordSynthesizer] = None,
        password_length: int = 15,
        fetch_identity: bool = True,
    ):
        """
        Initialize with a directory and its client configuration.

        Args:
            directory: Identity directory to drive
            config: Pool client configuration; its secret, if any, is used
                to compute the integrity tag for token authentication
            synthesizer: Password synthesizer (defaults to SystemRandom backed)
            password_length: Length of synthesized passwords
            fetch_identity: Look up identity attributes after a token auth
        """
        self.directory = directory
        self.config = config
        self.synthesizer = synthesizer or PasswordSynthesizer()
        self.policy = PasswordPolicy.strict(password_length)
        self.fetch_identity = fetch_identity

    async def provision(
        self,
        principal_id: str,
        display_name: str,
        email: str,
        ctx: Optional[OperationContext] = None,
    ) -> LifecycleOutcome:
        """
        Create a pool user for a Discord account and start its first session.

        Whether an existing user should be rotated instead is the caller's
        decision; this only reports it as rejected.

        Args:
            principal_id: Discord id, used as the pool username
            display_name: Discord username
            email: Email address from Discord
            ctx: Cancellation and deadline scope

        Returns:
            Provisioned, Rejected("already exists"), or Failed
        """
        operation = "provision"
        ctx = ctx or OperationContext()

        try:
            existing = await ctx.run(
                principal_id, operation, "find_user",
                self.directory.find_user, principal_id,
            )
        except (DirectoryError, OperationCancelled) as e:
            return self._failed(e, principal_id, operation)

        if existing is not None:
            logger.info(f"Principal {principal_id} already exists, not provisioning")
            return Rejected(reason=REASON_ALREADY_EXISTS)

        # Entropy failures are fatal and propagate
        password = self.synthesizer.generate(self.policy)

        attributes = {
            EMAIL_ATTRIBUTE: email,
            DISCORD_ID_ATTRIBUTE: principal_id,
            DISCORD_USERNAME_ATTRIBUTE: display_name,
        }

        try:
            subject_id = await ctx.run(
                principal_id, operation, "create_user",
                self.directory.create_user,
                principal_id, attributes, password, suppress_notification=True,
            )
        except UserAlreadyExists:
            logger.info(f"Principal {principal_id} was created concurrently")
            return Rejected(reason=REASON_ALREADY_EXISTS)
        except (DirectoryError, OperationCancelled) as e:
            return self._failed(e, principal_id, operation)

        logger.info(f"Created pool user for principal {principal_id}")

        # From here on the user exists, so failures leave a partial account
        # behind. They are surfaced, never rolled back or retried.
        step = "set_password"
        try:
            await ctx.run(
                principal_id, operation, step,
                self.directory.set_password, principal_id, password, permanent=True,
            )
            step = "authenticate_with_password"
            credential = await ctx.run(
                principal_id, operation, step,
                self.directory.authenticate_with_password, principal_id, password,
            )
        except OperationCancelled as e:
            return self._failed(e, principal_id, operation)
        except DirectoryError as e:
            return self._inconsistent(e, principal_id, operation, step)

        identity = ExternalIdentity(
            principal_id=principal_id,
            email=email,
            display_name=display_name,
            enabled=True,
            provider_subject_id=subject_id,
        )
        logger.info(f"Provisioned principal {principal_id}")
        return Provisioned(identity=identity, credential=credential)

    async def authenticate(
        self,
        principal_id: str,
        long_lived_token: str,
        ctx: Optional[OperationContext] = None,
    ) -> LifecycleOutcome:
        """
        Exchange a refresh token for a fresh access token.

        A refused token is an expected outcome and yields
        Rejected("unauthenticated") without further directory calls. The
        identity's enabled flag is returned for the caller but does not
        block issuance.

        Args:
            principal_id: Discord id
            long_lived_token: Refresh token from an earlier provision/rotate
            ctx: Cancellation and deadline scope

        Returns:
            Authenticated, Rejected("unauthenticated"), or Failed
        """
        operation = "authenticate"
        ctx = ctx or OperationContext()
        tag = self._integrity_tag(principal_id)

        try:
            credential = await ctx.run(
                principal_id, operation, "authenticate_with_token",
                self.directory.authenticate_with_token,
                principal_id, long_lived_token, tag,
            )
        except DirectoryRejected:
            logger.info(f"Principal {principal_id} could not be authenticated")
            return Rejected(reason=REASON_UNAUTHENTICATED)
        except (DirectoryError, OperationCancelled) as e:
            return self._failed(e, principal_id, operation)

        identity = None
        if self.fetch_identity:
            try:
                identity = await ctx.run(
                    principal_id, operation, "find_user",
                    self.directory.find_user, principal_id,
                )
            except (DirectoryError, OperationCancelled) as e:
                # Tokens were already issued, hand them over without attributes
                logger.warning(f"Identity lookup for principal {principal_id} failed: {e}")

        return Authenticated(identity=identity, credential=credential)

    async def rotate(
        self,
        principal_id: str,
        ctx: Optional[OperationContext] = None,
    ) -> LifecycleOutcome:
        """
        Force a new refresh token by replacing the user's password.

        The pool cannot extend a refresh token, so the unknown current
        password is overwritten with a fresh one that is used immediately.
        If session revocation or authentication fails after the password was
        replaced, the account is left with a password nobody knows and is
        reported as inconsistent; rotating again repairs it.

        Args:
            principal_id: Discord id
            ctx: Cancellation and deadline scope

        Returns:
            Rotated or Failed
        """
        operation = "rotate"
        ctx = ctx or OperationContext()

        password = self.synthesizer.generate(self.policy)

        try:
            await ctx.run(
                principal_id, operation, "set_password",
                self.directory.set_password, principal_id, password, permanent=True,
            )
        except SessionRevocationFailed as e:
            return self._inconsistent(e, principal_id, operation, "set_password")
        except (DirectoryError, OperationCancelled) as e:
            return self._failed(e, principal_id, operation)

        step = "authenticate_with_password"
        try:
            credential = await ctx.run(
                principal_id, operation, step,
                self.directory.authenticate_with_password, principal_id, password,
            )
        except OperationCancelled as e:
            return self._failed(e, principal_id, operation)
        except DirectoryError as e:
            return self._inconsistent(e, principal_id, operation, step)

        logger.info(f"Rotated credentials for principal {principal_id}")
        return Rotated(credential=credential)

    def _integrity_tag(self, principal_id: str) -> Optional[str]:
        if self.config is None:
            return None
        return integrity_tag(principal_id, self.config.client_id, self.config.client_secret)

    def _inconsistent(
        self,
        error: DirectoryError,
        principal_id: str,
        operation: str,
        step: str,
    ) -> Failed:
        # A failed sign-out happens after the password call itself succeeded
        if isinstance(error, SessionRevocationFailed):
            step = error.operation
        return self._failed(
            InconsistentState(principal_id, operation, step, type(error).__name__),
            principal_id,
            operation,
        )

    @staticmethod
    def _failed(error, principal_id: str, operation: str) -> Failed:
        outcome = Failed.from_error(error, principal_id, operation)
        if outcome.cause == "cancelled":
            logger.warning(f"{operation} for principal {principal_id} cancelled at {outcome.step}")
        else:
            logger.error(
                f"{operation} for principal {principal_id} failed at {outcome.step}: "
                f"{outcome.cause}"
            )
        return outcome

"""
Error taxonomy for the credential bridge.

Messages carry only opaque identifiers (principal id, operation, step).
Passwords and tokens must never be formatted into any of these.
"""
from typing import Optional


class BridgeError(Exception):
    """Base class for all bridge errors."""


class InvalidPolicy(BridgeError):
    """Password policy cannot be satisfied. Configuration error, never retried."""


class EntropyFailure(BridgeError):
    """The secure random source is unavailable."""


class DirectoryError(BridgeError):
    """Base class for errors raised by an identity directory."""

    def __init__(self, message: str, operation: str, principal_id: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.principal_id = principal_id


class DirectoryRejected(DirectoryError):
    """The directory refused the credentials (expired or invalid token, bad password)."""


class DirectoryUnavailable(DirectoryError):
    """Transient remote failure. Retry and backoff belong to the caller."""


class UserAlreadyExists(DirectoryError):
    """A user with this principal id is already in the pool."""


class SessionRevocationFailed(DirectoryUnavailable):
    """The password was replaced but earlier sessions could not be revoked."""


class InconsistentState(BridgeError):
    """A multi-step sequence stopped after mutating the directory."""

    def __init__(self, principal_id: str, operation: str, step: str, reason: str):
        super().__init__(
            f"{operation} for principal {principal_id} stopped at step "
            f"'{step}': {reason}"
        )
        self.principal_id = principal_id
        self.operation = operation
        self.step = step
        self.reason = reason


class OperationCancelled(BridgeError):
    """The operation context was cancelled or its deadline passed."""

    def __init__(self, principal_id: str, operation: str, step: str):
        super().__init__(f"{operation} for principal {principal_id} cancelled before '{step}'")
        self.principal_id = principal_id
        self.operation = operation
        self.step = step

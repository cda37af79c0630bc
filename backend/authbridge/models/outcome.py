"""
Tagged results of credential lifecycle operations.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from authbridge.core.errors import (
    BridgeError,
    DirectoryError,
    InconsistentState,
    OperationCancelled,
)
from authbridge.models.identity import ExternalIdentity, SessionCredential


REASON_ALREADY_EXISTS = "already exists"
REASON_UNAUTHENTICATED = "unauthenticated"

FailureCause = Literal["cancelled", "directory_unavailable", "inconsistent"]


class Provisioned(BaseModel):
    """A new identity was created and its first session issued."""
    kind: Literal["provisioned"] = "provisioned"
    identity: ExternalIdentity
    credential: SessionCredential


class Authenticated(BaseModel):
    """A long-lived token was exchanged for a fresh access token."""
    kind: Literal["authenticated"] = "authenticated"
    identity: Optional[ExternalIdentity] = None
    credential: SessionCredential


class Rotated(BaseModel):
    """The password was replaced and a new long-lived token issued."""
    kind: Literal["rotated"] = "rotated"
    credential: SessionCredential


class Rejected(BaseModel):
    """Expected business outcome, not an error."""
    kind: Literal["rejected"] = "rejected"
    reason: str


class Failed(BaseModel):
    """
    The operation could not complete.

    ``step`` names the directory call that failed or was skipped, so a
    partially completed sequence can be remediated.
    """
    kind: Literal["failed"] = "failed"
    cause: FailureCause
    operation: str
    principal_id: str
    step: Optional[str] = None
    detail: str = ""

    @classmethod
    def from_error(cls, error: BridgeError, principal_id: str, operation: str) -> "Failed":
        """Map a bridge error onto a failed outcome."""
        if isinstance(error, OperationCancelled):
            return cls(
                cause="cancelled",
                operation=operation,
                principal_id=principal_id,
                step=error.step,
                detail=str(error),
            )
        if isinstance(error, InconsistentState):
            return cls(
                cause="inconsistent",
                operation=operation,
                principal_id=principal_id,
                step=error.step,
                detail=str(error),
            )
        step = error.operation if isinstance(error, DirectoryError) else None
        return cls(
            cause="directory_unavailable",
            operation=operation,
            principal_id=principal_id,
            step=step,
            detail=str(error),
        )


LifecycleOutcome = Annotated[
    Union[Provisioned, Authenticated, Rotated, Rejected, Failed],
    Field(discriminator="kind"),
]

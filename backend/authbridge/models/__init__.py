"""
Pydantic models for identities, sessions, and lifecycle outcomes.
"""
from authbridge.models.identity import ExternalIdentity, SessionCredential
from authbridge.models.outcome import (
    Authenticated,
    Failed,
    LifecycleOutcome,
    Provisioned,
    Rejected,
    Rotated,
)

__all__ = [
    "ExternalIdentity",
    "SessionCredential",
    "Authenticated",
    "Failed",
    "LifecycleOutcome",
    "Provisioned",
    "Rejected",
    "Rotated",
]

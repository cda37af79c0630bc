"""
Security utilities for user pool client authentication.
"""
import base64
import hashlib
import hmac
from typing import Optional


def compute_secret_hash(principal_id: str, client_id: str, client_secret: str) -> str:
    """
    Compute the SECRET_HASH a user pool requires from clients that have a secret.

    Args:
        principal_id: Username in the pool (the Discord id)
        client_id: App client id
        client_secret: App client secret, used as the HMAC key

    Returns:
        Base64 encoded HMAC-SHA256 of ``principal_id + client_id``
    """
    message = (principal_id + client_id).encode("utf-8")
    digest = hmac.new(client_secret.encode("utf-8"), message, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def integrity_tag(
    principal_id: str,
    client_id: str,
    client_secret: Optional[str],
) -> Optional[str]:
    """
    Return the secret hash when the client is configured with a secret.

    Clients without a secret must not send one, so this returns None.
    """
    if not client_secret:
        return None
    return compute_secret_hash(principal_id, client_id, client_secret)

"""
Core module - Password synthesis, client secret hashing, errors, and operation scope.
"""
from authbridge.core.context import OperationContext
from authbridge.core.passwords import PasswordPolicy, PasswordSynthesizer, generate_password
from authbridge.core.security import compute_secret_hash, integrity_tag

__all__ = [
    "OperationContext",
    "PasswordPolicy",
    "PasswordSynthesizer",
    "generate_password",
    "compute_secret_hash",
    "integrity_tag",
]

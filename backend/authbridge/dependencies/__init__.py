"""
Dependencies for dependency injection in routes.
"""
from authbridge.dependencies.directory import (
    get_directory,
    get_lifecycle_manager,
    get_operation_context,
)

__all__ = [
    "get_directory",
    "get_lifecycle_manager",
    "get_operation_context",
]

"""
API Routers module.
"""
from authbridge.routers import cognito, discord, health

__all__ = ["cognito", "discord", "health"]

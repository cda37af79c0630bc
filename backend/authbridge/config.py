"""
Application configuration loaded from environment variables.
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings


@dataclass(frozen=True)
class DirectoryConfig:
    """Explicit user pool configuration handed to the directory at construction."""
    region: str
    user_pool_id: str
    client_id: str
    client_secret: Optional[str] = None
    endpoint_url: Optional[str] = None
    timeout_seconds: float = 10.0


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # AWS Cognito user pool
    aws_region: str = "us-east-1"
    user_pool_id: str = ""
    cognito_client_id: str = ""
    cognito_client_secret: Optional[SecretStr] = None
    cognito_endpoint_url: Optional[str] = None
    directory_timeout_seconds: float = 10.0

    # Discord OAuth application
    discord_client_id: str = ""
    discord_client_secret: SecretStr = SecretStr("")
    discord_redirect_uri: str = "http://localhost:8000/callback"
    discord_api_base: str = "https://discord.com/api/v10"

    # Synthesized password length (all four character classes are required)
    password_length: int = 15

    # Logging
    log_level: str = "INFO"

    cors_allow_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    def directory_config(self) -> DirectoryConfig:
        """Build the user pool configuration for the identity directory."""
        secret = self.cognito_client_secret
        return DirectoryConfig(
            region=self.aws_region,
            user_pool_id=self.user_pool_id,
            client_id=self.cognito_client_id,
            client_secret=secret.get_secret_value() if secret else None,
            endpoint_url=self.cognito_endpoint_url,
            timeout_seconds=self.directory_timeout_seconds,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Configuration management for the caller token codec."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CALLER_TOKEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Token cipher
    aes_key: str = Field(default="", description="Base64-encoded pre-shared AES key")

    # Request validation
    header_name: str = Field(
        default="X-Caller-Token", description="Header carrying the caller token"
    )
    reject_expired: bool = Field(
        default=True, description="Reject tokens whose expire timestamp has passed"
    )

    # Service Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Render logs as JSON")
    environment: str = Field(default="development", description="Environment name")


# Global settings instance
settings = Settings()

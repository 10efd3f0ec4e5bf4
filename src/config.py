"""
Configuration management for the WhatsApp commerce bot.
Loads settings from environment variables with validation.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = Path(__file__).parent.parent / "data"

    # HTTP server
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Bind port")

    # WhatsApp Cloud API
    whatsapp_access_token: Optional[str] = Field(
        default=None, description="Graph API access token"
    )
    whatsapp_phone_number_id: Optional[str] = Field(
        default=None, description="Phone number ID used as sender"
    )
    whatsapp_api_version: str = Field(default="v17.0", description="Graph API version")
    whatsapp_api_base: str = Field(
        default="https://graph.facebook.com", description="Graph API host"
    )
    whatsapp_catalog_id: Optional[str] = Field(
        default=None, description="Commerce catalog ID for product lists"
    )
    verify_token: Optional[str] = Field(
        default=None, description="Shared secret for the webhook handshake"
    )

    # Wit.ai
    wit_api_token: Optional[str] = Field(default=None, description="Wit.ai server token")
    wit_api_version: str = Field(default="20240304", description="Wit.ai API version")
    wit_api_url: str = Field(
        default="https://api.wit.ai/message", description="Wit.ai message endpoint"
    )

    http_timeout: float = Field(default=10.0, description="Outbound HTTP timeout, seconds")

    # Database
    database_url: Optional[str] = Field(
        default=None,
        description="Database connection URL",
    )

    @property
    def db_url(self) -> str:
        """Get database URL with absolute path."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.data_dir / 'commerce.db'}"

    # Conversation
    admin_resume_command: str = Field(
        default="!resume", description="Text prefix that hands a chat back to the bot"
    )
    order_id_prefix: str = Field(default="ORD", description="Order ID prefix")
    order_confirmation_template: str = Field(
        default="order_confirmation", description="Approved template sent after checkout"
    )
    template_language: str = Field(default="en_US", description="Template language code")

    # Debug
    debug: bool = Field(default=False, description="Debug mode")


# Global settings instance
settings = Settings()

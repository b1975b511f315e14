"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from datetime import date
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, model_validator, ConfigDict

from app.shared.campaign import CampaignWindow

# Project root: rowbot/
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./rowbot.db",
        description="Database connection URL"
    )

    # === Campaign ===
    campaign_start: date = Field(
        default=date(2024, 1, 1),
        description="First day of the pledge campaign (inclusive)"
    )
    campaign_end: date = Field(
        default=date(2024, 1, 14),
        description="Last day of the pledge campaign (inclusive)"
    )

    # === Concept2 ===
    concept2_client_id: Optional[str] = Field(default=None)
    concept2_client_secret: Optional[str] = Field(default=None)
    concept2_redirect_uri: Optional[str] = Field(default=None)
    concept2_base_url: str = Field(default="https://log.concept2.com")
    concept2_activity_type: str = Field(default="rower")
    http_timeout_seconds: float = Field(
        default=15.0,
        description="Timeout for every outbound Concept2 call"
    )

    # === Sync ===
    sync_interval_seconds: int = Field(
        default=3600,
        description="Background sync interval; 0 disables the loop"
    )

    # === Webhooks ===
    webhook_path: str = Field(default="/webhooks/concept2")
    webhook_secret: Optional[str] = Field(
        default=None,
        description="Expected Authorization header on webhook calls"
    )

    # === Admin ===
    admin_api_key: Optional[str] = Field(
        default=None,
        description="Shared key for the bot's admin calls (X-API-Key)"
    )

    # === Telegram ===
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram Bot token for confirmations and webhook mode"
    )
    telegram_webhook_secret: Optional[str] = Field(
        default=None,
        description="secret_token registered with setWebhook"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Public URL of this service"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('webhook_path')
    @classmethod
    def normalize_webhook_path(cls, v: str) -> str:
        if not v.startswith("/"):
            return f"/{v}"
        return v

    @model_validator(mode='after')
    def check_campaign_dates(self) -> "Settings":
        if self.campaign_start > self.campaign_end:
            raise ValueError("campaign_start must not be after campaign_end")
        return self

    @property
    def campaign_window(self) -> CampaignWindow:
        return CampaignWindow(start=self.campaign_start, end=self.campaign_end)

    @property
    def concept2_configured(self) -> bool:
        return bool(self.concept2_client_id and self.concept2_client_secret)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()

"""
Bot Configuration

Settings loaded from environment variables.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Bot settings."""

    bot_token: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    backend_url: str = "http://localhost:8000"

    debug: bool = False
    log_level: str = "INFO"

    # File limits
    max_file_size_mb: int = 20

    # Admin commands (/sync_meters)
    admin_telegram_ids: str = ""
    admin_api_key: Optional[str] = None
    sync_timeout_seconds: float = 600.0

    # Photo verification
    openai_api_key: Optional[str] = None
    verification_model: str = "gpt-4o-mini"
    enable_ai_autoverify: bool = True

    @property
    def token(self) -> str:
        """Get bot token from BOT_TOKEN or TELEGRAM_BOT_TOKEN."""
        t = self.bot_token or self.telegram_bot_token
        if not t:
            raise ValueError("BOT_TOKEN or TELEGRAM_BOT_TOKEN must be set")
        return t

    @property
    def admin_ids(self) -> set[str]:
        """Telegram IDs allowed to run admin commands."""
        return {part.strip() for part in self.admin_telegram_ids.split(",") if part.strip()}

    @property
    def photo_verification_enabled(self) -> bool:
        return self.enable_ai_autoverify and bool(self.openai_api_key)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

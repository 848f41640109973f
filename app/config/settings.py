"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

import re
from decimal import Decimal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.business_constants import (
    DEFAULT_COMMISSION_PER_REFERRAL,
    DEFAULT_MIN_PAID_REFERRALS,
    DEFAULT_MIN_WITHDRAWAL_AMOUNT,
)
from app.services.referral.config import ReferralProgramConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    telegram_bot_token: str
    bot_username: str | None = None

    # Database
    database_url: str
    database_echo: bool = False

    # Admin
    admin_telegram_ids: str = ""  # Comma-separated list

    # Redis (for FSM storage)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"

    # Bot status
    maintenance_mode: bool = False
    maintenance_message: str = (
        "🛠 The bot is under maintenance. Please try again later."
    )

    # Referral program
    commission_per_referral: Decimal = Field(
        default=DEFAULT_COMMISSION_PER_REFERRAL,
        gt=0,
        description="Fixed commission credited per paid referral (ETB)",
    )
    min_paid_referrals: int = Field(
        default=DEFAULT_MIN_PAID_REFERRALS,
        ge=0,
        description="Paid referrals required before a withdrawal",
    )
    min_withdrawal_amount: Decimal = Field(
        default=DEFAULT_MIN_WITHDRAWAL_AMOUNT,
        gt=0,
        description="Minimum withdrawal amount (ETB)",
    )
    withdrawals_enabled: bool = True
    referrals_enabled: bool = True
    referral_program_version: int = Field(
        default=1,
        ge=1,
        description="Bumped whenever referral program terms change",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )
            if not self.get_admin_ids():
                raise ValueError(
                    'ADMIN_TELEGRAM_IDS is required in production. '
                    'Withdrawal requests need at least one admin to review them.'
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    'DATABASE_URL points to SQLite in production. '
                    'Concurrent webhook deliveries need a server database.'
                )
        return self

    @field_validator('telegram_bot_token')
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate Telegram bot token format."""
        pattern = r'^\d+:[A-Za-z0-9_-]{35}$'
        if not re.match(pattern, v):
            raise ValueError(
                'Invalid Telegram bot token format. '
                'Expected format: 123456789:ABCdefGHIjklMNOpqrsTUVwxyz'
            )
        return v

    @field_validator('database_url')
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Use async drivers for plain postgres URLs."""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    def get_admin_ids(self) -> list[int]:
        """Parse admin IDs from comma-separated string with error handling."""
        if not self.admin_telegram_ids:
            return []

        result = []
        for id_ in self.admin_telegram_ids.split(","):
            id_stripped = id_.strip()
            if not id_stripped:
                continue
            try:
                result.append(int(id_stripped))
            except ValueError:
                logger.warning(f"Invalid admin ID: {id_stripped}")
                continue
        return result

    def is_admin(self, telegram_id: int) -> bool:
        """Check whether a Telegram user is a configured admin."""
        return telegram_id in self.get_admin_ids()

    def referral_program(self) -> ReferralProgramConfig:
        """
        Snapshot the referral program terms.

        Returns:
            Immutable config passed explicitly into the referral core
        """
        return ReferralProgramConfig(
            version=self.referral_program_version,
            commission_per_referral=self.commission_per_referral,
            min_paid_referrals=self.min_paid_referrals,
            min_withdrawal_amount=self.min_withdrawal_amount,
            withdrawals_enabled=self.withdrawals_enabled,
            referrals_enabled=self.referrals_enabled,
        )


# Global settings instance
settings = Settings()

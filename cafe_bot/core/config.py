"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes:
    - DEVELOPMENT: Uses the mock notification service (no Twilio account needed)
    - PRODUCTION: Sends owner notifications through Twilio WhatsApp

Business rules for pickup scheduling (opening days, pickup window, lead time)
live here as well and are turned into an immutable policy at startup.

Usage:
    from cafe_bot.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock services
    else:
        # Use real APIs

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import logging
import re
import sys
from datetime import time
from enum import Enum
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

DEVELOPMENT_OWNER_ADDRESS = "whatsapp:+4900000000000"


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with mock services
        PRODUCTION: Live environment with real API integrations
        STAGING: Pre-production testing with real APIs but test numbers
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


def _parse_clock(value: str) -> time:
    match = _CLOCK_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid clock time '{value}'. Expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Clock time out of range: '{value}'")
    return time(hour, minute)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (Twilio credentials) should NEVER be committed to
    version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the API server
        api_port: Port for the API server (PORT is honoured as well)

        # Business Configuration
        cafe_name: Display name used in greetings
        business_timezone: IANA timezone of the café
        open_weekdays: Comma-separated weekdays with pickup (0 = Monday)
        pickup_window_start: First pickup time of the day (HH:MM)
        pickup_window_end: Last pickup time of the day (HH:MM, inclusive)
        min_lead_minutes: Minimum preparation time before pickup
        paypal_link: Optional payment link appended to PayPal confirmations
        session_ttl_minutes: Minutes without any message after which a conversation is dropped

        # Twilio (WhatsApp)
        twilio_account_sid: Twilio Account SID
        twilio_auth_token: Twilio Auth Token
        twilio_whatsapp_from: Sender address, e.g. whatsapp:+14155238886
        owner_whatsapp_to: Shop owner address receiving new orders (required outside development)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Café Pickup Ordering Bot",
        description="Application display name"
    )
    app_version: str = Field(
        default="3.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("api_port", "port"),
        description="API server port"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    cafe_name: str = Field(
        default="Café am Markt",
        description="Café display name"
    )
    business_timezone: str = Field(
        default="Europe/Berlin",
        description="IANA timezone used for all pickup times"
    )
    open_weekdays: str = Field(
        default="0,1,2,3,4",
        description="Comma-separated weekdays with pickup (0 = Monday, 6 = Sunday)"
    )
    pickup_window_start: str = Field(
        default="07:00",
        description="Earliest pickup clock time (HH:MM)"
    )
    pickup_window_end: str = Field(
        default="15:00",
        description="Latest pickup clock time (HH:MM, inclusive)"
    )
    min_lead_minutes: int = Field(
        default=30,
        ge=0,
        description="Minimum minutes between ordering and pickup"
    )
    paypal_link: Optional[str] = Field(
        default=None,
        description="Payment link sent with PayPal confirmations"
    )
    session_ttl_minutes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Drop conversations with no message for longer than this (unset = never)"
    )

    # ==========================================================================
    # TWILIO (WHATSAPP)
    # ==========================================================================

    twilio_account_sid: Optional[str] = Field(
        default=None,
        description="Twilio Account SID"
    )
    twilio_auth_token: Optional[str] = Field(
        default=None,
        description="Twilio Auth Token"
    )
    twilio_whatsapp_from: Optional[str] = Field(
        default=None,
        description="Twilio WhatsApp sender, e.g. whatsapp:+14155238886"
    )
    owner_whatsapp_to: Optional[str] = Field(
        default=None,
        description="Shop owner address that receives confirmed orders"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("business_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names unknown to the tz database."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: '{v}'")
        return v

    @field_validator("open_weekdays")
    @classmethod
    def validate_open_weekdays(cls, v: str) -> str:
        """Require at least one weekday, each in 0..6."""
        days = [d.strip() for d in v.split(",") if d.strip()]
        if not days:
            raise ValueError("At least one open weekday is required")
        for day in days:
            if not day.isdigit() or int(day) > 6:
                raise ValueError(f"Invalid weekday '{day}'. Use 0 (Monday) to 6 (Sunday)")
        return v

    @field_validator("pickup_window_start", "pickup_window_end")
    @classmethod
    def validate_clock(cls, v: str) -> str:
        """Validate HH:MM clock strings."""
        _parse_clock(v)
        return v.strip()

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def open_weekdays_set(self) -> frozenset[int]:
        """Get open weekdays as a set of ints."""
        return frozenset(int(d) for d in self.open_weekdays.split(",") if d.strip())

    @property
    def pickup_window_start_time(self) -> time:
        return _parse_clock(self.pickup_window_start)

    @property
    def pickup_window_end_time(self) -> time:
        return _parse_clock(self.pickup_window_end)

    @property
    def owner_address(self) -> Optional[str]:
        """Owner address; a placeholder stands in during development only."""
        if self.owner_whatsapp_to:
            return self.owner_whatsapp_to
        return None if self.use_real_services else DEVELOPMENT_OWNER_ADDRESS

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.twilio_account_sid:
                missing.append("TWILIO_ACCOUNT_SID")
            if not self.twilio_auth_token:
                missing.append("TWILIO_AUTH_TOKEN")
            if not self.twilio_whatsapp_from:
                missing.append("TWILIO_WHATSAPP_FROM")
            if not self.owner_whatsapp_to:
                missing.append("OWNER_WHATSAPP_TO")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once,
    improving performance and ensuring consistency across
    the application lifecycle.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured root logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("twilio.http_client").setLevel(logging.WARNING)

    return logging.getLogger("cafe_bot")

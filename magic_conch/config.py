"""
Configuration Management Module

This module handles all application configuration using Pydantic Settings.
Configuration is loaded from environment variables with strong typing and validation.

Design Decisions:
- Use Pydantic Settings for automatic environment variable loading
- Read the environment once per process (cached settings)
- Hand the request path an immutable BotConfig instead of the raw settings
- Missing bot ID is tolerated by default and only enforced in strict mode
"""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TRIGGER_PREFIX = "/magicconch"


class MissingConfigurationError(Exception):
    """Raised when a required setting (the GroupMe bot ID) is absent."""
    pass


class BotConfig(BaseModel):
    """
    Immutable bot configuration shared by every request.

    Built once from Settings when the application is created and injected
    into the webhook handler.
    """

    model_config = ConfigDict(frozen=True)

    bot_id: str = ""
    trigger_prefix: str = DEFAULT_TRIGGER_PREFIX
    reply_threaded: bool = True

    @property
    def has_bot_id(self) -> bool:
        return bool(self.bot_id)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The bot ID authorizes posting into the group, so it is never logged.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # =========================================================================
    # GroupMe Configuration
    # =========================================================================
    groupme_bot_id: str = Field(
        default="",
        description="GroupMe bot ID used for posting and self-message detection"
    )

    groupme_api_base: str = Field(
        default="https://api.groupme.com/v3",
        description="Base URL of the GroupMe v3 API"
    )

    groupme_timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=60.0,
        description="Timeout in seconds for the outbound bot post"
    )

    # =========================================================================
    # Conch Behaviour
    # =========================================================================
    conch_trigger_prefix: str = Field(
        default=DEFAULT_TRIGGER_PREFIX,
        min_length=1,
        description="Message prefix that summons the Magic Conch"
    )

    conch_reply_threaded: bool = Field(
        default=True,
        description="Post replies threaded to the triggering message"
    )

    strict_startup: bool = Field(
        default=False,
        description="Refuse to start when the bot ID is not configured"
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server"
    )

    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port to bind the server"
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_json_format: bool = Field(
        default=True,
        description="Enable JSON logging format"
    )

    log_requests: bool = Field(
        default=False,
        description="Enable request/response logging"
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("groupme_api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================
    @property
    def groupme_post_url(self) -> str:
        """Full URL of the bot post endpoint."""
        return f"{self.groupme_api_base}/bots/post"

    def require_bot_id(self) -> str:
        """
        Get the configured bot ID.

        Returns:
            The bot ID

        Raises:
            MissingConfigurationError: If GROUPME_BOT_ID is not set
        """
        if not self.groupme_bot_id:
            raise MissingConfigurationError(
                "GroupMe bot ID not configured. Set the groupme_bot_id environment variable"
            )
        return self.groupme_bot_id

    def bot_config(self) -> BotConfig:
        """Build the immutable per-process bot configuration."""
        return BotConfig(
            bot_id=self.groupme_bot_id,
            trigger_prefix=self.conch_trigger_prefix,
            reply_threaded=self.conch_reply_threaded,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache so the environment is read only once per process.

    Returns:
        Settings instance
    """
    return Settings()

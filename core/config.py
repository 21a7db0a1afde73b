"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Environment
    environment: str = Field(default="development")

    # Application
    app_name: str = "mailgate"
    app_version: str = "0.1.0"

    # Email delivery API (Postmark compatible)
    email_base_url: str = Field(default="http://localhost:5010")
    email_sender: str = Field(default="noreply@example.com")
    email_authorization_token: Optional[SecretStr] = Field(default=None)
    email_timeout_milliseconds: int = Field(default=10000)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("email_base_url")
    @classmethod
    def validate_email_base_url(cls, v):
        if not v.strip():
            raise ValueError("Email base URL cannot be empty")
        return v.strip()

    @field_validator("email_timeout_milliseconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("Email timeout must be a positive number of milliseconds")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Validate production-specific settings after all fields are set"""
        if self.environment == "production" and not self.email_authorization_token:
            raise ValueError("Email authorization token required in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def sender(self):
        """Parse the configured sender address"""
        # delivery imports core, so resolve lazily
        from delivery.domain import SubscriberEmail

        return SubscriberEmail.parse(self.email_sender)

    def timeout(self) -> timedelta:
        """Request timeout for the email client"""
        return timedelta(milliseconds=self.email_timeout_milliseconds)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    def model_dump(self, **kwargs):
        """Override to mask sensitive fields when serializing"""
        data = super().model_dump(**kwargs)

        sensitive_fields = ["email_authorization_token"]

        for field in sensitive_fields:
            if field in data and data[field]:
                # Handle SecretStr values
                if hasattr(data[field], "get_secret_value"):
                    value = data[field].get_secret_value()
                else:
                    value = str(data[field])

                # Keep first 4 chars for identification on long tokens only
                if len(value) > 8:
                    data[field] = value[:4] + "*" * (len(value) - 4)
                else:
                    data[field] = "*" * len(value)

        return data


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

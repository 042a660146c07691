"""
Signup settings - pydantic-settings configuration.

Backend location, the email domain policy, OTP timing and the in-app
paths the flow navigates to. Values come from the environment or a
.env file; field names map to variables case-insensitively.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Backend configuration
    server_url: str = "http://localhost:3000"
    request_timeout_seconds: float = 10.0

    # Signup policy
    allowed_email_suffix: str = "@gmail.com"  # Only this provider's addresses may sign up
    otp_length: int = 6
    otp_cooldown_seconds: int = 60  # Wait between OTP dispatch requests
    cooldown_tick_seconds: float = 1.0

    # Navigation targets
    post_signup_path: str = "/student"
    login_path: str = "/login"
    federated_auth_path: str = "/api/auth/google"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Main application settings and configuration management.

This module composes all the application settings from the different modules
(app, database, auth, email) into a single `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object. Only the application factory and the
dependency-injection layer read this singleton; services receive it through
their constructors.

Environment Support:
- Development: Uses .env, debug on, reset codes logged instead of mailed
- Test: Uses .env.test, reset codes logged instead of mailed
- Staging: Uses .env.staging, SMTP credentials required
- Production: Uses .env.production, SMTP credentials required
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings

logger = logging.getLogger(__name__)
logging.getLogger("passlib").setLevel(logging.ERROR)


class Settings(AppSettings, DatabaseSettings, AuthSettings, EmailSettings):
    """The main settings class that aggregates all application configurations.

    Security Note:
        - TOKEN_SECRET and SMTP credentials are SecretStr values and are never
          rendered by the logging calls below.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env in ("development", "test"):
            self.EMAIL_TEST_MODE = True

        if env == "development":
            self.DEBUG = True

        logger.info(
            "Application running in %s environment (debug=%s, email test mode=%s)",
            env,
            self.DEBUG,
            self.EMAIL_TEST_MODE,
        )

    def validate_required_fields(self) -> None:
        """Validates configuration that cannot be expressed as field constraints.

        Raises:
            ValueError: If real email delivery is enabled without SMTP credentials
                outside of development and test.
        """
        try:
            self.validate_smtp_config()
        except ValueError as e:
            if self.APP_ENV in ("development", "test"):
                logger.warning("Email config warning: %s", e)
            else:
                logger.error("Email configuration error: %s", e)
                raise


def create_settings() -> Settings:
    """Create settings instance with environment-specific configuration.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }
    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        return Settings(_env_file=env_file)
    if Path(".env").exists():
        logger.info("Loading environment configuration from .env (environment: %s)", env)
    else:
        logger.warning("No .env file found, using environment variables only (environment: %s)", env)
    return Settings()


settings = create_settings()
settings.validate_required_fields()

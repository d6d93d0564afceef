"""Authentication settings: session tokens, reset codes and federated identity.
"""

import logging
from datetime import timedelta
from typing import List, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    """Defines settings for session tokens, password hashing, reset codes and
    Google identity federation.

    Security Note:
        - TOKEN_SECRET signs every session token; it must be a random string of
          at least 32 characters and never be logged or committed.
        - GOOGLE_CLIENT_ID is the audience every federated assertion must carry.
          An empty value makes every federated login fail.
    """

    # Session tokens
    TOKEN_SECRET: SecretStr = Field(...)
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "markethub-auth"
    PASSWORD_TOKEN_TTL_HOURS: int = Field(ge=1, default=24)
    FEDERATED_TOKEN_TTL_DAYS: int = Field(ge=1, default=7)

    # Password hashing
    BCRYPT_WORK_FACTOR: int = Field(ge=4, le=31, default=12)

    # Password reset codes
    RESET_CODE_TTL_MINUTES: int = Field(ge=1, default=60)

    # Google identity federation
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_JWKS_URL: str = "https://www.googleapis.com/oauth2/v3/certs"
    GOOGLE_ISSUERS: Union[str, List[str]] = Field(
        default="https://accounts.google.com,accounts.google.com"
    )
    FEDERATED_JWKS_CACHE_SECONDS: int = Field(ge=0, default=3600)
    FEDERATED_CLOCK_SKEW_SECONDS: int = Field(ge=0, default=60)

    @field_validator("TOKEN_SECRET")
    @classmethod
    def _validate_token_secret(cls, v: SecretStr) -> SecretStr:
        """Rejects short signing secrets before any token is issued."""
        if len(v.get_secret_value()) < 32:
            logger.error("TOKEN_SECRET is shorter than 32 characters")
            raise ValueError("TOKEN_SECRET must be at least 32 characters long")
        return v

    @field_validator("GOOGLE_ISSUERS", mode="before")
    @classmethod
    def _split_issuers(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def password_token_ttl(self) -> timedelta:
        return timedelta(hours=self.PASSWORD_TOKEN_TTL_HOURS)

    @property
    def federated_token_ttl(self) -> timedelta:
        return timedelta(days=self.FEDERATED_TOKEN_TTL_DAYS)

    @property
    def reset_code_ttl(self) -> timedelta:
        return timedelta(minutes=self.RESET_CODE_TTL_MINUTES)

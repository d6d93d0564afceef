"""Email configuration settings.

Defines the SMTP parameters used to dispatch password-reset codes. In test
mode no connection is opened and messages are only logged.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults.

    Attributes:
        EMAIL_SMTP_HOST: SMTP server hostname
        EMAIL_SMTP_PORT: SMTP server port (587 for STARTTLS, 465 for SSL)
        EMAIL_SMTP_USERNAME: SMTP authentication username
        EMAIL_SMTP_PASSWORD: SMTP authentication password (SecretStr)
        EMAIL_SMTP_USE_TLS: Upgrade the connection with STARTTLS
        EMAIL_SMTP_USE_SSL: Connect over implicit TLS instead
        EMAIL_FROM_EMAIL: Sender address
        EMAIL_FROM_NAME: Sender display name
        EMAIL_TEST_MODE: Log messages instead of sending them
    """

    EMAIL_SMTP_HOST: str = Field(default="localhost", description="SMTP server hostname")
    EMAIL_SMTP_PORT: int = Field(default=587, ge=1, le=65535)
    EMAIL_SMTP_USERNAME: Optional[str] = None
    EMAIL_SMTP_PASSWORD: Optional[SecretStr] = None
    EMAIL_SMTP_USE_TLS: bool = True
    EMAIL_SMTP_USE_SSL: bool = False
    EMAIL_FROM_EMAIL: str = "no-reply@markethub.app"
    EMAIL_FROM_NAME: str = "MarketHub"
    EMAIL_TEST_MODE: bool = False

    def validate_smtp_config(self) -> None:
        """Raises ValueError when real delivery is enabled without credentials."""
        if self.EMAIL_TEST_MODE:
            return
        if not self.EMAIL_SMTP_USERNAME or not self.EMAIL_SMTP_PASSWORD:
            raise ValueError("EMAIL_SMTP_USERNAME and EMAIL_SMTP_PASSWORD are required")

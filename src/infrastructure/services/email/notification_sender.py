"""Email delivery of password reset codes.

Implements `INotificationSender` on top of fastapi-mail. Message bodies are
rendered with Jinja2 (auto-escaping on) and sent as HTML with a plain-text
alternative. In test mode no SMTP connection is configured and the message is
only logged, with the recipient and code masked.
"""

from typing import Optional

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors
from fastapi_mail.schemas import MultipartSubtypeEnum
from jinja2 import Environment, select_autoescape

from src.core.config.email import EmailSettings
from src.core.exceptions import NotificationError
from src.domain.interfaces.services import INotificationSender
from src.domain.value_objects.email import mask_email

logger = structlog.get_logger(__name__)

RESET_CODE_SUBJECT = "Your password reset code"

RESET_CODE_HTML = """\
<p>Hello,</p>
<p>Use the code below to reset your {{ app_name }} password:</p>
<p style="font-size:24px;letter-spacing:4px;"><strong>{{ code }}</strong></p>
<p>The code expires in {{ ttl_minutes }} minutes. If you did not ask for a reset you can ignore this email.</p>
"""

RESET_CODE_TEXT = """\
Use the code {{ code }} to reset your {{ app_name }} password.
The code expires in {{ ttl_minutes }} minutes. If you did not ask for a reset you can ignore this email.
"""


class EmailNotificationSender(INotificationSender):
    """Sends reset codes by email.

    Attributes:
        settings (EmailSettings): SMTP connection and sender configuration.
        test_mode (bool): Log messages instead of sending them.
        fastmail (Optional[FastMail]): Configured client; ``None`` in test mode.
    """

    def __init__(self, settings: EmailSettings, app_name: str = "MarketHub", ttl_minutes: int = 60):
        self.settings = settings
        self.test_mode = settings.EMAIL_TEST_MODE
        self.app_name = app_name
        self.ttl_minutes = ttl_minutes
        self.jinja_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
        self._html_template = self.jinja_env.from_string(RESET_CODE_HTML)
        self._text_template = Environment(autoescape=False).from_string(RESET_CODE_TEXT)
        self.fastmail: Optional[FastMail] = None
        self._setup_fastmail()

    def _setup_fastmail(self) -> None:
        if self.test_mode:
            logger.info("Email sender in test mode - reset codes will be logged")
            return

        s = self.settings
        config = ConnectionConfig(
            MAIL_USERNAME=s.EMAIL_SMTP_USERNAME or "",
            MAIL_PASSWORD=s.EMAIL_SMTP_PASSWORD.get_secret_value() if s.EMAIL_SMTP_PASSWORD else "",
            MAIL_FROM=s.EMAIL_FROM_EMAIL,
            MAIL_FROM_NAME=s.EMAIL_FROM_NAME,
            MAIL_SERVER=s.EMAIL_SMTP_HOST,
            MAIL_PORT=s.EMAIL_SMTP_PORT,
            MAIL_STARTTLS=s.EMAIL_SMTP_USE_TLS and not s.EMAIL_SMTP_USE_SSL,
            MAIL_SSL_TLS=s.EMAIL_SMTP_USE_SSL,
            USE_CREDENTIALS=bool(s.EMAIL_SMTP_USERNAME and s.EMAIL_SMTP_PASSWORD),
            VALIDATE_CERTS=True,
        )
        self.fastmail = FastMail(config)
        logger.info("FastMail configured", server=s.EMAIL_SMTP_HOST, port=s.EMAIL_SMTP_PORT)

    def build_message(self, email: str, code: str) -> MessageSchema:
        context = {"app_name": self.app_name, "code": code, "ttl_minutes": self.ttl_minutes}
        return MessageSchema(
            subject=RESET_CODE_SUBJECT,
            recipients=[email],
            body=self._html_template.render(**context),
            alternative_body=self._text_template.render(**context),
            subtype=MessageType.html,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )

    async def send_reset_code(self, email: str, code: str) -> None:
        if self.test_mode:
            logger.info(
                "Email test mode - reset code not sent",
                recipient=mask_email(email),
                subject=RESET_CODE_SUBJECT,
                code=code[:1] + "*" * (len(code) - 1),
            )
            return

        message = self.build_message(email, code)
        try:
            await self.fastmail.send_message(message)
        except ConnectionErrors as e:
            logger.error(
                "Failed to send reset code email",
                recipient=mask_email(email),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise NotificationError() from e
        logger.info("Reset code email sent", recipient=mask_email(email))

import logging
import smtplib
import ssl
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from typing import Optional

from chanjo.core.config import Environment, Settings, settings as default_settings

logger = logging.getLogger(__name__)


class EmailService:
    """SMTP email gateway. ``send_email`` returns False instead of raising."""

    def __init__(self, config: Optional[Settings] = None):
        config = config or default_settings
        # Validate required email configuration
        if not config.SMTP_SERVER:
            raise ValueError("SMTP_SERVER is required but not configured")
        if not config.SMTP_PORT:
            raise ValueError("SMTP_PORT is required but not configured")
        if not config.FROM_EMAIL:
            raise ValueError("FROM_EMAIL is required but not configured")

        self.smtp_server = config.SMTP_SERVER
        self.smtp_port = int(config.SMTP_PORT)
        self.smtp_username = config.SMTP_USERNAME
        self.smtp_password = config.SMTP_PASSWORD
        self.from_email = config.FROM_EMAIL
        self.from_name = config.FROM_NAME
        self.environment = config.ENVIRONMENT

    def send_email(self, to_email: str, subject: str, html_content: str, text_content: Optional[str] = None) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email

        # Plain text first so clients prefer the HTML part
        if text_content:
            msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))
        return self._send_email(msg, to_email)

    def _send_email(self, msg: MIMEMultipart, to_email: str) -> bool:
        """Send email using SMTP"""
        try:
            logger.info(f"Sending email to {to_email} via {self.smtp_server}:{self.smtp_port}")
            context = ssl.create_default_context()
            if self.smtp_port == 465:
                # SSL connection for port 465
                with smtplib.SMTP_SSL(self.smtp_server, self.smtp_port, context=context) as server:
                    if self.smtp_username and self.smtp_password:
                        server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)
            else:
                # STARTTLS for port 587
                with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                    server.starttls(context=context)
                    if self.smtp_username and self.smtp_password:
                        server.login(self.smtp_username, self.smtp_password)
                    server.send_message(msg)

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            if self.environment == Environment.DEVELOPMENT:
                logger.info(f"[DEV] Would send email to {to_email}, subject: {msg['Subject']}")
            return False

"""SMTP implementation of the email sender port.

When no SMTP host is configured the rendered message is logged instead of
delivered, which keeps local development and CI free of mail servers.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage

from ecommerce_auth.core.logger import redact_email
from ecommerce_auth.services._shared.ports import EmailSender, OutgoingEmail

log = logging.getLogger(__name__)

PLATFORM_NAME = "E-commerce Platform"

TEMPLATES: dict[str, dict[str, str]] = {
    "verification": {
        "subject": f"Verify Your Email - {PLATFORM_NAME}",
        "body": (
            "Hi {first_name},\n\n"
            "Thanks for registering. Verify your email by visiting:\n{link}\n\n"
            "If you didn't create an account, you can safely ignore this email."
        ),
    },
    "password_reset": {
        "subject": f"Reset Your Password - {PLATFORM_NAME}",
        "body": (
            "Hi {first_name},\n\n"
            "You requested to reset your password. Create a new one here:\n{link}\n\n"
            "This link will expire in 1 hour. If you didn't request a password "
            "reset, you can safely ignore this email."
        ),
    },
    "welcome": {
        "subject": f"Welcome to {PLATFORM_NAME}!",
        "body": (
            "Welcome {first_name}!\n\n"
            "Your account has been verified. Start shopping at {link}"
        ),
    },
}


class SMTPEmailSender(EmailSender):
    """
    Render transactional templates and deliver them over SMTP.

    :param frontend_url: Base URL for links embedded in emails.
    :param from_email: ``From`` address.
    :param smtp_host: SMTP server; ``None`` switches to log-only mode.
    :param smtp_port: SMTP port.
    :param smtp_user: Optional login user.
    :param smtp_password: Optional login password.
    :param smtp_use_tls: Use STARTTLS on a plain connection.
    :param timeout: Socket timeout in seconds.
    """

    def __init__(
        self,
        *,
        frontend_url: str,
        from_email: str,
        smtp_host: str | None = None,
        smtp_port: int = 587,
        smtp_user: str | None = None,
        smtp_password: str | None = None,
        smtp_use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.frontend_url = frontend_url.rstrip("/")
        self.from_email = from_email
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> SMTPEmailSender:
        return cls(
            frontend_url=config.get("FRONTEND_URL", "http://localhost:4200"),
            from_email=config.get("EMAIL_FROM", "noreply@ecommerce.com"),
            smtp_host=config.get("SMTP_HOST"),
            smtp_port=int(config.get("SMTP_PORT", 587)),
            smtp_user=config.get("SMTP_USER"),
            smtp_password=config.get("SMTP_PASSWORD"),
            smtp_use_tls=bool(config.get("SMTP_USE_TLS", True)),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.from_email)

    # ------------------------- rendering -------------------------

    def render(self, kind: str, *, to: str, first_name: str, link: str | None) -> OutgoingEmail:
        template = TEMPLATES[kind]
        body = template["body"].format(first_name=first_name, link=link or "")
        return OutgoingEmail(kind=kind, to=to, subject=template["subject"], body=body, link=link)

    # ------------------------- port API -------------------------

    def send_verification_email(self, *, to: str, first_name: str, token: str) -> None:
        link = f"{self.frontend_url}/verify-email?token={token}"
        self.deliver(self.render("verification", to=to, first_name=first_name, link=link))

    def send_password_reset_email(self, *, to: str, first_name: str, token: str) -> None:
        link = f"{self.frontend_url}/reset-password?token={token}"
        self.deliver(self.render("password_reset", to=to, first_name=first_name, link=link))

    def send_welcome_email(self, *, to: str, first_name: str) -> None:
        self.deliver(self.render("welcome", to=to, first_name=first_name, link=self.frontend_url))

    # ------------------------- transport -------------------------

    def deliver(self, message: OutgoingEmail) -> bool:
        """
        Send ``message``; failures are logged and reported as ``False``.

        A broken mail relay must not undo a registration or a reset request
        that has already been committed.
        """
        to = redact_email(message.to)
        if not self.is_configured:
            log.info("Email (log-only) kind=%s to=%s subject=%s", message.kind, to, message.subject)
            return True

        mail = EmailMessage()
        mail["Subject"] = message.subject
        mail["From"] = self.from_email
        mail["To"] = message.to
        mail.set_content(message.body)

        try:
            if self.smtp_use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                    server.starttls(context=ssl.create_default_context())
                    self._login(server)
                    server.send_message(mail)
            else:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                    self._login(server)
                    server.send_message(mail)
        except (smtplib.SMTPException, OSError):
            log.error("Email delivery failed kind=%s to=%s", message.kind, to, exc_info=True)
            return False

        log.info("Email sent kind=%s to=%s", message.kind, to)
        return True

    def _login(self, server: smtplib.SMTP) -> None:
        if self.smtp_user and self.smtp_password:
            server.login(self.smtp_user, self.smtp_password)

"""
Mail Dispatcher - sends verification emails.

The workflow only sees `send(destination, template_id, payload) -> DeliveryResult`.
Delivery problems are returned, never raised: a failed email must not
undo a verification request that is already stored.
"""

import smtplib
from email.message import EmailMessage
from typing import Callable, Dict, Tuple

from app.core.config import get_settings
from app.core.logger import log_info, log_warning
from app.models.verification import DeliveryResult

COMPANY_EMAIL_VERIFICATION = "company_email_verification"


# ============================================================
# TEMPLATES
# template_id -> (payload -> (subject, body))
# ============================================================

def _render_company_email_verification(payload: dict) -> Tuple[str, str]:
    subject = "Verify your company email for recruiter access"
    body = (
        f"Hello,\n\n"
        f"Someone asked to link this address to a recruiter account for {payload['company_name']}.\n\n"
        f"To confirm, open the link below:\n"
        f"{payload['confirm_url']}\n\n"
        f"Or enter this verification code: {payload['token']}\n\n"
        f"The link expires at {payload['expires_at']} (UTC).\n"
        f"If you did not request this, you can ignore this email.\n"
    )
    return subject, body


TEMPLATES: Dict[str, Callable[[dict], Tuple[str, str]]] = {
    COMPANY_EMAIL_VERIFICATION: _render_company_email_verification,
}


def render_template(template_id: str, payload: dict) -> Tuple[str, str]:
    """Render (subject, body). Raises KeyError for unknown templates."""
    return TEMPLATES[template_id](payload)


class MessageDispatcher:
    """Base dispatcher. Subclasses implement send()."""

    def send(self, destination: str, template_id: str, payload: dict) -> DeliveryResult:
        raise NotImplementedError


class SmtpDispatcher(MessageDispatcher):
    """
    Sends plaintext email over SMTP.

    Every socket operation is bounded by `timeout` seconds.
    """

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        sender: str = "no-reply@localhost",
        sender_name: str = "Job Platform",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.sender_name = sender_name
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.port and self.sender)

    def _build_message(self, destination: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"{self.sender_name} <{self.sender}>"
        msg["To"] = destination
        msg.set_content(body)
        return msg

    def _open(self) -> smtplib.SMTP:
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        if self.use_tls:
            server.starttls()
        return server

    def send(self, destination: str, template_id: str, payload: dict) -> DeliveryResult:
        if not self.enabled:
            return DeliveryResult(delivered=False, error="SMTP email settings are not configured")

        try:
            subject, body = render_template(template_id, payload)
        except KeyError:
            return DeliveryResult(delivered=False, error=f"Unknown email template: {template_id}")

        msg = self._build_message(destination, subject, body)

        try:
            with self._open() as server:
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError:
            log_warning(f"SMTP auth failed for {self.username}")
            return DeliveryResult(delivered=False, error="SMTP authentication failed")
        except TimeoutError:
            log_warning(f"SMTP timeout for host {self.host}")
            return DeliveryResult(delivered=False, error="SMTP connection timed out")
        except smtplib.SMTPException as e:
            log_warning(f"SMTP error while sending to {destination}: {e}")
            return DeliveryResult(delivered=False, error="SMTP server rejected the message")
        except OSError as e:
            log_warning(f"SMTP network error while sending to {destination}: {e}")
            return DeliveryResult(delivered=False, error="SMTP network error")

        log_info(f"Sent '{template_id}' email to {destination}")
        return DeliveryResult(delivered=True)


def get_smtp_dispatcher() -> SmtpDispatcher:
    settings = get_settings()
    return SmtpDispatcher(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        sender=settings.smtp_from,
        sender_name=settings.smtp_from_name,
        use_tls=settings.smtp_use_tls,
        timeout=settings.smtp_timeout_seconds,
    )

"""
Email adapter for the accounts backend.

The default implementation uses SMTP, reading the transport (well-known
service name or explicit host/port) and credentials from Settings.
"""

from __future__ import annotations

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging
import smtplib
import ssl

from .config import Settings
from .errors import MailDeliveryError

logger = logging.getLogger(__name__)

# host, port for the service names accepted in MAIL_SERVICE
WELL_KNOWN_SERVICES = {
    "gmail": ("smtp.gmail.com", 465),
    "sendpulse": ("smtp-pulse.com", 465),
    "outlook": ("smtp-mail.outlook.com", 587),
    "hotmail": ("smtp-mail.outlook.com", 587),
    "yahoo": ("smtp.mail.yahoo.com", 465),
    "sendgrid": ("smtp.sendgrid.net", 587),
    "mailgun": ("smtp.mailgun.org", 465),
    "zoho": ("smtp.zoho.com", 465),
}


class Mailer:
    """Send e-mails over SMTP."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.host, self.port = self._resolve_transport(settings)

    @staticmethod
    def _resolve_transport(settings: Settings) -> tuple[str, int]:
        host = settings.smtp_host
        port = settings.smtp_port
        if not host and settings.mail_service:
            known = WELL_KNOWN_SERVICES.get(settings.mail_service)
            if known is None:
                logger.warning(
                    "Unknown MAIL_SERVICE %r; set SMTP_HOST instead",
                    settings.mail_service,
                    extra={"component": "mailer"},
                )
            else:
                host = known[0]
                port = port or known[1]
        return host, port or 465

    @property
    def configured(self) -> bool:
        s = self.settings
        return bool(self.host and s.mail_user and s.mail_password and s.mail_from)

    def send(self, subject: str, to_email: str, text_body: str, html_body: str | None = None) -> bool:
        """
        Send a message, returning True once the server accepted it.

        An unconfigured transport skips the send and returns False; any SMTP
        or socket failure raises MailDeliveryError.
        """
        if not self.configured:
            logger.warning("SMTP transport not configured; skipping mail to %s", to_email, extra={"component": "mailer"})
            return False
        s = self.settings
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = s.mail_from
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))
        try:
            if self.port == 465:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=s.smtp_timeout) as server:
                    server.login(s.mail_user, s.mail_password)
                    server.sendmail(s.mail_from, [to_email], msg.as_string())
            else:
                with smtplib.SMTP(self.host, self.port, timeout=s.smtp_timeout) as server:
                    server.ehlo()
                    server.starttls(context=ssl.create_default_context())
                    server.login(s.mail_user, s.mail_password)
                    server.sendmail(s.mail_from, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send mail to %s: %s", to_email, exc, extra={"component": "mailer"})
            raise MailDeliveryError(str(exc)) from exc
        logger.info("Mail sent to %s", to_email, extra={"component": "mailer"})
        return True

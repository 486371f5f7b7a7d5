from __future__ import annotations

import html
import logging
import smtplib
import ssl
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from typing import Any, List, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError as PydanticValidationError

from app.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

IMPORTANT_NOTES = [
    "Please arrive 15 minutes before the scheduled time",
    "Bring the required pooja materials as per the seva type",
    "Make necessary payment arrangements with the priest",
]


@dataclass
class MailResult:
    success: bool
    message_id: Optional[str] = None
    sent_to: List[str] = field(default_factory=list)
    error: Optional[str] = None
    code: Optional[str] = None


def parse_recipients(raw: str | None) -> List[str]:
    """Split a comma-separated distribution list and keep only valid addresses."""
    if not raw:
        return []
    valid: List[str] = []
    for candidate in (part.strip() for part in raw.split(",")):
        if not candidate:
            continue
        try:
            valid.append(str(_email_adapter.validate_python(candidate)))
        except PydanticValidationError:
            logger.warning("Ignoring invalid reminder recipient: %s", candidate)
    return valid


def format_pooja_date(value: date) -> str:
    """e.g. ``Wednesday, 4 June 2025``."""
    return f"{value.strftime('%A')}, {value.day} {value.strftime('%B %Y')}"


def _booking_value(booking: Any, name: str) -> Any:
    if isinstance(booking, dict):
        return booking.get(name)
    return getattr(booking, name, None)


def build_reminder_message(booking: Any, sender: str, sender_name: str, recipients: List[str]) -> EmailMessage:
    pooja_date = _booking_value(booking, "pooja_date")
    if isinstance(pooja_date, str):
        pooja_date = date.fromisoformat(pooja_date[:10])
    seva_type = _booking_value(booking, "seva_type")
    sevakartha = _booking_value(booking, "sevakartha_name")
    department = _booking_value(booking, "department")
    formatted_date = format_pooja_date(pooja_date)

    message = EmailMessage()
    message["Subject"] = f"Reminder: {seva_type} Pooja Tomorrow ({formatted_date})"
    message["From"] = formataddr((sender_name, sender))
    message["To"] = ", ".join(recipients)
    message["Message-ID"] = make_msgid(domain=sender.split("@")[-1] if "@" in sender else None)

    notes_text = "\n".join(f"  - {note}" for note in IMPORTANT_NOTES)
    message.set_content(
        f"REMINDER: {seva_type} Pooja Tomorrow ({formatted_date})\n\n"
        "Booking Details:\n"
        f"  - Sevakartha: {sevakartha}\n"
        f"  - Department: {department}\n"
        f"  - Seva Type: {seva_type}\n"
        f"  - Date: {formatted_date}\n\n"
        "Important Notes:\n"
        f"{notes_text}\n\n"
        "This is an automated reminder from the Seva Booking System.\n"
        "Please do not reply to this email.\n"
    )

    rows = "".join(
        f'<tr><td style="padding: 8px; border-bottom: 1px solid #ddd;"><strong>{label}:</strong></td>'
        f'<td style="padding: 8px; border-bottom: 1px solid #ddd;">{html.escape(str(value))}</td></tr>'
        for label, value in (
            ("Sevakartha", sevakartha),
            ("Department", department),
            ("Seva Type", seva_type),
            ("Date", formatted_date),
        )
    )
    notes_html = "".join(f"<li>{note}</li>" for note in IMPORTANT_NOTES)
    year = datetime.now(timezone.utc).year
    message.add_alternative(
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
        '<h1 style="text-align: center; background-color: #4CAF50; color: white; padding: 15px;">Pooja Reminder</h1>'
        f"<h2>Reminder: {html.escape(str(seva_type))} is scheduled for tomorrow!</h2>"
        f'<table style="width: 100%; border-collapse: collapse;">{rows}</table>'
        f"<h4>Important Notes:</h4><ul>{notes_html}</ul>"
        '<p style="color: #666; font-size: 14px; text-align: center;">'
        "This is an automated reminder from the Seva Booking System.<br>Please do not reply to this email.</p>"
        f'<p style="font-size: 12px; color: #777; text-align: center;">&copy; {year} Seva Booking System</p>'
        "</div>",
        subtype="html",
    )
    return message


class ReminderMailer:
    """Sends reminder emails to the configured distribution list over SMTP."""

    def __init__(self, config: Settings | None = None):
        self.config = config or default_settings

    def _connect(self) -> smtplib.SMTP:
        cfg = self.config
        context = ssl.create_default_context()
        if cfg.smtp_port == 465:
            client: smtplib.SMTP = smtplib.SMTP_SSL(
                cfg.smtp_host, cfg.smtp_port, timeout=cfg.mail_timeout_seconds, context=context
            )
        else:
            client = smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=cfg.mail_timeout_seconds)
            client.starttls(context=context)
        client.login(cfg.mail_user or "", cfg.mail_pass or "")
        return client

    def send(self, booking: Any) -> MailResult:
        if booking is None or not _booking_value(booking, "pooja_date"):
            logger.error("Invalid booking data for reminder email")
            return MailResult(success=False, error="Invalid booking data")

        if not self.config.receiver_emails:
            logger.warning("No receiver emails configured (RECEIVER_EMAILS)")
            return MailResult(success=False, error="No receiver emails configured")

        recipients = parse_recipients(self.config.receiver_emails)
        if not recipients:
            logger.warning("No valid email addresses in RECEIVER_EMAILS")
            return MailResult(success=False, error="No valid email addresses")

        if not self.config.mail_user or not self.config.mail_pass:
            logger.warning("Mail sender credentials are not configured (MAIL_USER/MAIL_PASS)")
            return MailResult(success=False, error="Sender credentials not configured")

        message = build_reminder_message(booking, self.config.mail_user, self.config.mail_sender_name, recipients)
        try:
            client = self._connect()
            try:
                client.send_message(message)
            finally:
                client.quit()
        except smtplib.SMTPAuthenticationError as exc:
            logger.error("SMTP authentication failed; check MAIL_USER and MAIL_PASS")
            return MailResult(success=False, error="Authentication failed", code=str(exc.smtp_code))
        except smtplib.SMTPRecipientsRefused:
            logger.error("Invalid email addresses in RECEIVER_EMAILS")
            return MailResult(success=False, error="Recipients refused", code="recipients_refused")
        except (smtplib.SMTPException, OSError) as exc:
            # OSError covers socket timeouts and refused connections.
            logger.error("Failed to send reminder email: %s", exc)
            return MailResult(success=False, error=str(exc) or exc.__class__.__name__, code=exc.__class__.__name__)

        logger.info(
            "Reminder email sent: message_id=%s to=%s subject=%s",
            message["Message-ID"],
            recipients,
            message["Subject"],
        )
        return MailResult(success=True, message_id=message["Message-ID"], sent_to=recipients)

    def verify_connection(self) -> MailResult:
        """Log in to the SMTP server and disconnect; nothing is sent."""
        try:
            client = self._connect()
            client.quit()
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email connection verification failed: %s", exc)
            return MailResult(success=False, error=str(exc) or exc.__class__.__name__, code=exc.__class__.__name__)
        logger.info("Email server is ready to send messages")
        return MailResult(success=True)


__all__ = [
    "MailResult",
    "ReminderMailer",
    "build_reminder_message",
    "format_pooja_date",
    "parse_recipients",
]

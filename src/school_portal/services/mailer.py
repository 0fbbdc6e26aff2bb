"""
school_portal.services.mailer

Plain SMTP mail delivery.

Responsibilities:
- Build messages (text body, optional attachments) and send them over SMTP.
- Degrade to a logged no-op when SMTP is not configured.
"""

from __future__ import annotations

import asyncio
import mimetypes
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from pathlib import Path

from school_portal.observability.logging import get_logger
from school_portal.settings import Settings

log = get_logger(__name__)


@dataclass(slots=True)
class MailResult:
    sent: bool
    error: str | None = None


@dataclass(slots=True)
class Attachment:
    path: Path
    filename: str | None = None
    content_type: str | None = field(default=None)


class Mailer:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @property
    def configured(self) -> bool:
        return self._settings.smtp_configured

    def _build(
        self, *, to: str, subject: str, body: str, attachments: list[Attachment]
    ) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._settings.email_from
        msg["To"] = to
        msg.set_content(body)
        for att in attachments:
            ctype = att.content_type or mimetypes.guess_type(att.path.name)[0] or "application/octet-stream"
            maintype, subtype = ctype.split("/", 1)
            msg.add_attachment(
                att.path.read_bytes(),
                maintype=maintype,
                subtype=subtype,
                filename=att.filename or att.path.name,
            )
        return msg

    def _send_blocking(self, msg: EmailMessage) -> None:
        s = self._settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=10) as smtp:
            if s.smtp_use_tls:
                smtp.starttls()
            if s.smtp_username:
                smtp.login(s.smtp_username, s.smtp_password or "")
            smtp.send_message(msg)

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        attachments: list[Attachment] | None = None,
    ) -> MailResult:
        if not self.configured:
            log.info("mail.skipped", to=to, subject=subject, reason="smtp not configured")
            return MailResult(sent=False, error="SMTP not configured")

        msg = self._build(to=to, subject=subject, body=body, attachments=attachments or [])
        try:
            # smtplib is blocking; keep it off the event loop.
            await asyncio.to_thread(self._send_blocking, msg)
        except (smtplib.SMTPException, OSError) as e:
            log.error("mail.failed", to=to, subject=subject, error=str(e))
            return MailResult(sent=False, error=str(e)[:400])

        log.info("mail.sent", to=to, subject=subject)
        return MailResult(sent=True)


# --- Module Notes -----------------------------------------------------------
# Mail is best-effort: callers log the result but never fail a request because of it.

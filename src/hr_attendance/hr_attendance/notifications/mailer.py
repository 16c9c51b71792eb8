from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

from ..common.logging import kv
from ..core.constants import DEFAULT_MAIL_TIMEOUT_SECONDS


class Mailer(Protocol):
    def send(self, to: str, subject: str, body: str) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class MailSettings:
    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = ""
    timeout_seconds: float = DEFAULT_MAIL_TIMEOUT_SECONDS
    use_tls: bool = True

    @classmethod
    def from_settings(cls, settings) -> "MailSettings":
        return cls(
            host=str(getattr(settings, "MAIL_HOST", "") or ""),
            port=int(getattr(settings, "MAIL_PORT", 587)),
            user=str(getattr(settings, "MAIL_USER", "") or ""),
            password=str(getattr(settings, "MAIL_PASSWORD", "") or ""),
            sender=str(getattr(settings, "MAIL_SENDER", "") or ""),
            timeout_seconds=float(getattr(settings, "MAIL_TIMEOUT_SECONDS", DEFAULT_MAIL_TIMEOUT_SECONDS)),
            use_tls=bool(getattr(settings, "MAIL_USE_TLS", True)),
        )


class SmtpMailer(Mailer):
    """Plain SMTP delivery with a bounded socket timeout."""

    def __init__(self, settings: MailSettings, *, logger: Optional[logging.Logger] = None):
        self._settings = settings
        self._log = logger or logging.getLogger(__name__)

    def send(self, to: str, subject: str, body: str) -> bool:
        s = self._settings
        if not s.host:
            self._log.debug("mail disabled, skipping %s", kv(to=to, subject=subject))
            return False

        msg = EmailMessage()
        msg["From"] = s.sender or s.user
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)

        with smtplib.SMTP(s.host, s.port, timeout=s.timeout_seconds) as smtp:
            if s.use_tls:
                smtp.starttls()
            if s.user:
                smtp.login(s.user, s.password)
            smtp.send_message(msg)
        self._log.info("mail sent %s", kv(to=to, subject=subject))
        return True

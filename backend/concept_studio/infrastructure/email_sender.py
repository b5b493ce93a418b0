"""SMTP Email Sender — outbound email collaborator for operations notifications.

Invariants:
    - One SMTP connection per message (login, send, quit)
    - Blocking smtplib calls run in the threadpool, never on the event loop
    - Failures propagate as exceptions — the notification worker decides what to do

Design Decisions:
    - stdlib smtplib + email.message: SMTP relay credentials are the only config
      the operations inbox needs
"""

import logging
import smtplib
from email.message import EmailMessage

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class SmtpEmailSender:
    """Sends HTML email through an authenticated SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        use_tls: bool = True,
        timeout_seconds: int = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    async def send(
        self, *, from_addr: str, to: str, subject: str, html: str, reply_to: str,
    ) -> None:
        message = EmailMessage()
        message["From"] = from_addr
        message["To"] = to
        message["Subject"] = subject
        message["Reply-To"] = reply_to
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html, subtype="html")
        await run_in_threadpool(self._deliver, message)
        logger.info(f"Notification email sent to {to}")

    def _deliver(self, message: EmailMessage) -> None:
        # Port 465 is implicit TLS; anything else upgrades with STARTTLS
        if self.port == 465:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout_seconds) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(message)
            return
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as smtp:
            if self.use_tls:
                smtp.starttls()
            smtp.login(self.user, self.password)
            smtp.send_message(message)

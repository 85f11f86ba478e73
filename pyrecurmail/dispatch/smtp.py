# pyrecurmail/dispatch/smtp.py
import asyncio
import logging
from email.message import EmailMessage
from typing import Optional

import aiosmtplib

from .base import Dispatcher, DispatchResult

logger = logging.getLogger(__name__)


class SmtpDispatcher(Dispatcher):
    """Delivers HTML email through an SMTP relay using aiosmtplib."""

    def __init__(
        self,
        hostname: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        start_tls: bool = True,
        timeout: float = 30.0,
    ):
        self.hostname = hostname
        self.port = port
        self.username = username or None
        self.password = password or None
        self.sender = sender or username
        self.start_tls = start_tls
        self.timeout = timeout

    def build_message(self, recipient: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        if self.sender:
            message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")
        return message

    async def send(self, recipient: str, subject: str, html_body: str) -> DispatchResult:
        message = self.build_message(recipient, subject, html_body)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.start_tls,
                timeout=self.timeout,
            )
        except aiosmtplib.SMTPException as e:
            logger.warning(f"SMTP error while sending to {recipient}: {e}")
            return DispatchResult.fail(f"{type(e).__name__}: {e}")
        except (asyncio.TimeoutError, OSError) as e:
            logger.warning(f"Transport error while sending to {recipient}: {e!r}")
            return DispatchResult.fail(f"{type(e).__name__}: {e}")
        return DispatchResult.ok()

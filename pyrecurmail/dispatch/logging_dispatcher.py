# pyrecurmail/dispatch/logging_dispatcher.py
import logging

from .base import Dispatcher, DispatchResult

logger = logging.getLogger(__name__)


class LoggingDispatcher(Dispatcher):
    """Dry-run dispatcher: logs each message instead of sending it."""

    def __init__(self):
        self.sent_count = 0

    async def send(self, recipient: str, subject: str, html_body: str) -> DispatchResult:
        self.sent_count += 1
        logger.info(
            f"[dry-run] Would send '{subject}' to {recipient} ({len(html_body)} chars)"
        )
        return DispatchResult.ok()

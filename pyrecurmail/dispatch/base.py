# pyrecurmail/dispatch/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pyrecurmail.common.exceptions import DispatchFailure


@dataclass(frozen=True)
class DispatchResult:
    success: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "DispatchResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error: str) -> "DispatchResult":
        return cls(success=False, error=error)

    def raise_for_failure(self, recipient: str) -> None:
        if not self.success:
            raise DispatchFailure(recipient, self.error or "unknown error")


class Dispatcher(ABC):
    """Sends one message to one recipient.

    Implementations report delivery problems through ``DispatchResult.fail``
    rather than raising.
    """

    @abstractmethod
    async def send(
        self, recipient: str, subject: str, html_body: str
    ) -> DispatchResult: ...

# pyrecurmail/common/job.py
import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from typing import Optional


@dataclass(frozen=True)
class Payload:
    """The message a job delivers on every attempt."""

    subject: str
    content: str  # HTML body


@dataclass
class JobState:
    """
    Represents one recurring email job, keyed by its recipient.

    This is the central data model held by the job registry. Bookkeeping
    fields are only written through the registry so that snapshots never
    observe a half-updated record.
    """

    key: str
    payload: Payload
    interval: timedelta
    generation: int

    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_attempt_at: Optional[datetime] = None
    next_scheduled_at: Optional[datetime] = None

    # Attempt bookkeeping
    attempt_count: int = 0
    failure_count: int = 0
    last_outcome: Optional[str] = None
    last_error: Optional[str] = None

    # Owned by the registry entry, used only to cancel
    timer_handle: Optional[asyncio.TimerHandle] = field(
        default=None, repr=False, compare=False
    )

    def to_snapshot(self) -> "JobSnapshot":
        return JobSnapshot(
            key=self.key,
            payload=self.payload,
            interval=self.interval,
            generation=self.generation,
            started_at=self.started_at,
            last_attempt_at=self.last_attempt_at,
            next_scheduled_at=self.next_scheduled_at,
            attempt_count=self.attempt_count,
            failure_count=self.failure_count,
            last_outcome=self.last_outcome,
            last_error=self.last_error,
        )


@dataclass(frozen=True)
class JobSnapshot:
    """Read-only copy of a JobState, without its timer handle."""

    key: str
    payload: Payload
    interval: timedelta
    generation: int
    started_at: datetime
    last_attempt_at: Optional[datetime]
    next_scheduled_at: Optional[datetime]
    attempt_count: int
    failure_count: int
    last_outcome: Optional[str]
    last_error: Optional[str]

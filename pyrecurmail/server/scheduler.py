# pyrecurmail/server/scheduler.py
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import Optional, Set

from pyrecurmail.common.exceptions import InvalidInput
from pyrecurmail.common.job import JobState, Payload
from pyrecurmail.common.states import AttemptResult, StartOutcome, StopOutcome
from pyrecurmail.dispatch.base import Dispatcher
from pyrecurmail.storage.base import JobRegistry
from .context import AttemptContext
from .processor import AttemptProcessor

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = timedelta(minutes=1)


@dataclass(frozen=True)
class StartResult:
    outcome: StartOutcome
    first_attempt: AttemptResult
    generation: int
    next_scheduled_at: Optional[datetime]


class JobScheduler:
    """
    Runs one recurring dispatch chain per recipient key.

    Every chain is a sequence of one-shot event loop timers: when a timer
    fires, one attempt runs, and only once its outcome is known is the next
    timer armed. Each timer and attempt is tagged with the generation of the
    job that created it; anything carrying a generation the registry no
    longer holds for its key is a no-op. Cancelling the timer handle covers
    timers that have not fired yet, the generation check covers the rest.
    """

    def __init__(
        self,
        registry: JobRegistry,
        dispatcher: Dispatcher,
        default_interval: timedelta = DEFAULT_INTERVAL,
    ):
        if not isinstance(default_interval, timedelta) or default_interval <= timedelta(0):
            raise InvalidInput("default_interval must be a positive timedelta")
        self.registry = registry
        self.dispatcher = dispatcher
        self.default_interval = default_interval
        self._in_flight: Set[asyncio.Task] = set()

    async def start(
        self, key: str, payload: Payload, interval: Optional[timedelta] = None
    ) -> StartResult:
        """Creates or replaces the job for ``key`` and performs its first attempt.

        The first attempt is awaited so the caller learns whether it went
        through, but its failure does not prevent the chain from being armed.

        Raises:
            InvalidInput: if the key or payload is empty or the interval is
                not positive. Nothing is installed in that case.
        """
        if interval is None:
            interval = self.default_interval
        self._validate(key, payload, interval)

        with self.registry.transaction():
            previous = self.registry.get(key)
            if previous is not None and previous.timer_handle is not None:
                previous.timer_handle.cancel()
            generation = self.registry.next_generation(key)
            self.registry.put(
                key,
                JobState(key=key, payload=payload, interval=interval, generation=generation),
            )

        outcome = StartOutcome.CREATED if previous is None else StartOutcome.REPLACED
        logger.info(
            f"Job {key} {outcome.value} (generation {generation}, "
            f"every {interval.total_seconds():g}s)"
        )

        context = AttemptContext(key=key, generation=generation, payload=payload, first=True)
        first_attempt = await AttemptProcessor(context, self.registry, self.dispatcher).process()

        try:
            next_scheduled_at = self._arm(key, generation)
        except Exception:
            # Never leave an ACTIVE entry behind that has no timer
            with self.registry.transaction():
                state = self.registry.get(key)
                if state is not None and state.generation == generation:
                    self.registry.remove(key)
            raise
        return StartResult(
            outcome=outcome,
            first_attempt=first_attempt,
            generation=generation,
            next_scheduled_at=next_scheduled_at,
        )

    async def stop(self, key: str) -> StopOutcome:
        with self.registry.transaction():
            state = self.registry.remove(key)
            if state is None:
                return StopOutcome.NOT_FOUND
            if state.timer_handle is not None:
                state.timer_handle.cancel()

        logger.info(f"Job {key} stopped (generation {state.generation})")
        return StopOutcome.STOPPED

    async def shutdown(self) -> None:
        """Cancels every pending timer, drops all jobs and waits for in-flight attempts."""
        with self.registry.transaction():
            for snapshot in self.registry.snapshot():
                state = self.registry.remove(snapshot.key)
                if state is not None and state.timer_handle is not None:
                    state.timer_handle.cancel()

        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)
        logger.info("Job scheduler shut down")

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def _validate(self, key: str, payload: Payload, interval: timedelta) -> None:
        if not isinstance(key, str) or not key.strip():
            raise InvalidInput("Recipient key must be a non-empty string")
        if not isinstance(payload, Payload):
            raise InvalidInput("Payload is required")
        for field_name in ("subject", "content"):
            value = getattr(payload, field_name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidInput(f"Payload {field_name} must be a non-empty string")
        if not isinstance(interval, timedelta) or interval <= timedelta(0):
            raise InvalidInput("Interval must be a positive duration")
        try:
            datetime.now(UTC) + interval
        except OverflowError:
            raise InvalidInput("Interval is too large to schedule") from None

    def _arm(self, key: str, generation: int) -> Optional[datetime]:
        loop = asyncio.get_running_loop()
        with self.registry.transaction():
            state = self.registry.get(key)
            if state is None or state.generation != generation:
                logger.debug(f"Job {key}: not arming superseded generation {generation}")
                return None

            next_scheduled_at = datetime.now(UTC) + state.interval
            handle = loop.call_later(
                state.interval.total_seconds(), self._fire, key, generation
            )
            self.registry.update_job_fields(
                key,
                {"timer_handle": handle, "next_scheduled_at": next_scheduled_at},
                expected_generation=generation,
            )
            return next_scheduled_at

    def _fire(self, key: str, generation: int) -> None:
        updated = self.registry.update_job_fields(
            key,
            {"timer_handle": None, "next_scheduled_at": None},
            expected_generation=generation,
        )
        if not updated:
            logger.debug(f"Job {key}: ignoring stale timer for generation {generation}")
            return

        task = asyncio.get_running_loop().create_task(self._run_attempt(key, generation))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run_attempt(self, key: str, generation: int) -> None:
        with self.registry.transaction():
            state = self.registry.get(key)
            if state is None or state.generation != generation:
                return
            payload = state.payload

        context = AttemptContext(key=key, generation=generation, payload=payload)
        try:
            await AttemptProcessor(context, self.registry, self.dispatcher).process()
        except Exception:
            logger.error(f"Unexpected error during attempt for job {key}.", exc_info=True)

        self._arm(key, generation)

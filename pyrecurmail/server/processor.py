# pyrecurmail/server/processor.py
import logging
from datetime import datetime, UTC

from pyrecurmail.common.states import AttemptResult, FailedAttempt
from pyrecurmail.dispatch.base import Dispatcher
from pyrecurmail.execution.performer import perform_dispatch
from pyrecurmail.storage.base import JobRegistry
from .context import AttemptContext

logger = logging.getLogger(__name__)


class AttemptProcessor:
    def __init__(self, context: AttemptContext, registry: JobRegistry, dispatcher: Dispatcher):
        self.context = context
        self.registry = registry
        self.dispatcher = dispatcher

    async def process(self) -> AttemptResult:
        key = self.context.key

        # 1. Perform the dispatch
        result = await perform_dispatch(self.dispatcher, key, self.context.payload)
        finished_at = datetime.now(UTC)

        # 2. Report the outcome. Failures never stop the chain.
        if isinstance(result, FailedAttempt):
            kind = "first" if self.context.first else "scheduled"
            logger.error(f"Error sending {kind} email to {key}: {result.error}")
        else:
            logger.info(f"Email sent to {key} at {finished_at.isoformat()}")

        # 3. Record bookkeeping, only if this generation still owns the key
        recorded = self._record(result, finished_at)
        if not recorded:
            logger.debug(
                f"Job {key}: generation {self.context.generation} was superseded "
                f"during its attempt; bookkeeping skipped"
            )
        return result

    def _record(self, result: AttemptResult, finished_at: datetime) -> bool:
        with self.registry.transaction():
            state = self.registry.get(self.context.key)
            if state is None or state.generation != self.context.generation:
                return False
            fields = {
                "last_attempt_at": finished_at,
                "attempt_count": state.attempt_count + 1,
                "last_outcome": result.name,
                "last_error": None,
            }
            if isinstance(result, FailedAttempt):
                fields["failure_count"] = state.failure_count + 1
                fields["last_error"] = result.error
            return self.registry.update_job_fields(
                self.context.key, fields, expected_generation=self.context.generation
            )

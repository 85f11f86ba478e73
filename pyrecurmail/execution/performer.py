# pyrecurmail/execution/performer.py
import logging

from pyrecurmail.common.exceptions import DispatchFailure
from pyrecurmail.common.job import Payload
from pyrecurmail.common.states import AttemptResult, FailedAttempt, SucceededAttempt
from pyrecurmail.dispatch.base import Dispatcher

logger = logging.getLogger(__name__)


async def perform_dispatch(
    dispatcher: Dispatcher, recipient: str, payload: Payload
) -> AttemptResult:
    """Runs one dispatch and turns any outcome, raised or returned, into an attempt state."""
    try:
        result = await dispatcher.send(recipient, payload.subject, payload.content)
        result.raise_for_failure(recipient)
    except DispatchFailure as e:
        return FailedAttempt(error=e.error, exception_type=type(e).__name__)
    except Exception as e:
        logger.error(f"Dispatcher raised while sending to {recipient}.", exc_info=True)
        return FailedAttempt(error=str(e) or type(e).__name__, exception_type=type(e).__name__)

    return SucceededAttempt()

# pyrecurmail/client.py
import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from .common.exceptions import InvalidInput
from .common.job import Payload
from .common.states import FailedAttempt, StartOutcome, StopOutcome
from .query import QueryService
from .serialization.base import BaseSerializer
from .serialization.json_serializer import JsonSerializer
from .server.scheduler import JobScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResult:
    status_code: int
    body: Dict[str, Any]


def parse_interval_minutes(value: Any) -> Optional[timedelta]:
    """Converts an ``intervalMinutes`` request value; ``None`` means use the default."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInput("intervalMinutes must be a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise InvalidInput("intervalMinutes must be a finite number")
    if value <= 0:
        raise InvalidInput("intervalMinutes must be greater than zero")
    try:
        return timedelta(minutes=value)
    except OverflowError:
        raise InvalidInput("intervalMinutes is too large") from None


def _minutes(interval: timedelta) -> str:
    return f"{interval.total_seconds() / 60:g}"


class Client:
    """
    Request/response facade over the scheduler and the query service.

    Each method takes a decoded JSON body and returns an ``ApiResult`` so the
    HTTP integrations only have to map it onto their own response type.
    """

    def __init__(
        self,
        scheduler: JobScheduler,
        query: Optional[QueryService] = None,
        serializer: Optional[BaseSerializer] = None,
    ):
        self.scheduler = scheduler
        self.serializer = serializer or JsonSerializer()
        self.query = query or QueryService(scheduler.registry, self.serializer)

    async def start_job(self, data: Mapping[str, Any]) -> ApiResult:
        if not isinstance(data, Mapping):
            return _failure(400, "Request body must be a JSON object")

        recipient = data.get("recipient")
        subject = data.get("subject")
        content = data.get("content")
        if not recipient or not subject or not content:
            return _failure(400, "Missing required fields")

        try:
            interval = parse_interval_minutes(data.get("intervalMinutes"))
            result = await self.scheduler.start(
                recipient, Payload(subject=subject, content=content), interval
            )
        except InvalidInput as e:
            return _failure(400, str(e))
        except Exception:
            logger.error("Error starting email schedule.", exc_info=True)
            return _failure(500, "Server error")

        every = _minutes(interval or self.scheduler.default_interval)
        body = {
            "outcome": result.outcome.value,
            "firstAttempt": self.serializer.serialize_attempt(result.first_attempt),
        }
        if isinstance(result.first_attempt, FailedAttempt):
            body["success"] = False
            body["message"] = (
                f"Email schedule started, but the first email to {recipient} failed: "
                f"{result.first_attempt.error}. Will try again every {every} minute(s)"
            )
            return ApiResult(502, body)

        verb = "started" if result.outcome is StartOutcome.CREATED else "replaced"
        body["success"] = True
        body["message"] = (
            f"Email schedule {verb}. Sending every {every} minute(s) to {recipient}"
        )
        return ApiResult(200, body)

    async def stop_job(self, data: Mapping[str, Any]) -> ApiResult:
        recipient = data.get("recipient") if isinstance(data, Mapping) else None
        if not recipient:
            return _failure(400, "Recipient email is required")

        outcome = await self.scheduler.stop(recipient)
        if outcome is StopOutcome.NOT_FOUND:
            return _failure(404, "No active email schedule found for this recipient")
        return ApiResult(
            200, {"success": True, "message": f"Email schedule to {recipient} stopped"}
        )

    def list_active_jobs(self) -> ApiResult:
        jobs = self.query.list_active()
        return ApiResult(200, {"success": True, "jobs": jobs, "count": len(jobs)})

    def health_status(self) -> ApiResult:
        return ApiResult(200, {"status": "ok", **self.query.health_summary()})


def _failure(status_code: int, message: str) -> ApiResult:
    return ApiResult(status_code, {"success": False, "message": message})

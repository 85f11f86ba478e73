# pyrecurmail/serialization/json_serializer.py
from datetime import datetime
from typing import Dict, Any, Optional

from pyrecurmail.serialization.base import BaseSerializer
from pyrecurmail.common.job import JobSnapshot, Payload
from pyrecurmail.common.states import AttemptResult


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class JsonSerializer(BaseSerializer):
    """Turns registry snapshots into JSON-ready dicts for the HTTP surface."""

    def __init__(self, preview_length: int = 80):
        self.preview_length = preview_length

    def serialize_snapshot(self, snapshot: JobSnapshot) -> Dict[str, Any]:
        data = {
            "key": snapshot.key,
            "intervalMinutes": snapshot.interval.total_seconds() / 60,
            "startedAt": _isoformat(snapshot.started_at),
            "lastAttemptAt": _isoformat(snapshot.last_attempt_at),
            "nextScheduledAt": _isoformat(snapshot.next_scheduled_at),
            "attemptCount": snapshot.attempt_count,
            "failureCount": snapshot.failure_count,
            "lastOutcome": snapshot.last_outcome,
        }
        data.update(self.serialize_payload_summary(snapshot.payload))
        if snapshot.last_error:
            data["lastError"] = snapshot.last_error
        return data

    def serialize_payload_summary(self, payload: Payload) -> Dict[str, Any]:
        preview = payload.content
        if len(preview) > self.preview_length:
            preview = preview[: self.preview_length] + "..."
        return {"subject": payload.subject, "contentPreview": preview}

    def serialize_attempt(self, attempt: AttemptResult) -> Dict[str, Any]:
        data = attempt.serialize_data()
        data["state"] = attempt.name
        return data

# pyrecurmail/common/states.py

from datetime import datetime, UTC
from enum import Enum
from typing import Dict, Any, Optional


class StartOutcome(str, Enum):
    CREATED = "created"
    REPLACED = "replaced"


class StopOutcome(str, Enum):
    STOPPED = "stopped"
    NOT_FOUND = "not_found"


class BaseAttemptState:
    NAME = "base"

    def __init__(self, created_at: Optional[datetime] = None):
        self.created_at = created_at or datetime.now(UTC)

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def succeeded(self) -> bool:
        return False

    def serialize_data(self) -> Dict[str, Any]:
        return {"created_at": self.created_at.isoformat()}


class SucceededAttempt(BaseAttemptState):
    NAME = "succeeded"

    @property
    def succeeded(self) -> bool:
        return True


class FailedAttempt(BaseAttemptState):
    NAME = "failed"

    def __init__(self, error: str, exception_type: Optional[str] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.error = error
        self.exception_type = exception_type

    def serialize_data(self) -> Dict[str, Any]:
        data = super().serialize_data()
        data["error"] = self.error
        if self.exception_type:
            data["exception_type"] = self.exception_type
        return data


AttemptResult = BaseAttemptState

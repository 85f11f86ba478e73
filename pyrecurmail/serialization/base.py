# pyrecurmail/serialization/base.py
from abc import ABC, abstractmethod
from typing import Dict, Any

from pyrecurmail.common.job import JobSnapshot, Payload
from pyrecurmail.common.states import AttemptResult


class BaseSerializer(ABC):
    @abstractmethod
    def serialize_snapshot(self, snapshot: JobSnapshot) -> Dict[str, Any]: ...

    @abstractmethod
    def serialize_payload_summary(self, payload: Payload) -> Dict[str, Any]: ...

    @abstractmethod
    def serialize_attempt(self, attempt: AttemptResult) -> Dict[str, Any]: ...

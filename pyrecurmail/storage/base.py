# pyrecurmail/storage/base.py
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, List, Any, Dict

from pyrecurmail.common.job import JobState, JobSnapshot


class JobRegistry(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[JobState]: ...

    @abstractmethod
    def put(self, key: str, state: JobState) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> Optional[JobState]: ...

    @abstractmethod
    def snapshot(self) -> List[JobSnapshot]: ...

    @abstractmethod
    def count(self) -> int: ...

    @abstractmethod
    def next_generation(self, key: str) -> int: ...

    @abstractmethod
    def update_job_fields(
        self, key: str, fields: Dict[str, Any], expected_generation: int
    ) -> bool: ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager: ...

# pyrecurmail/storage/memory_storage.py
from dataclasses import fields as dataclass_fields
from threading import RLock
from typing import Optional, List, Dict, Any

from pyrecurmail.storage.base import JobRegistry
from pyrecurmail.common.job import JobState, JobSnapshot

_UPDATABLE_FIELDS = {
    f.name for f in dataclass_fields(JobState)
} - {"key", "payload", "interval", "generation", "started_at"}


class MemoryJobRegistry(JobRegistry):
    def __init__(self):
        self._jobs: Dict[str, JobState] = {}
        # Last generation issued per key; survives remove() so that a
        # restarted key never reuses a generation an old callback still holds.
        self._generations: Dict[str, int] = {}
        self._lock = RLock()

    def transaction(self) -> RLock:
        return self._lock

    def get(self, key: str) -> Optional[JobState]:
        with self._lock:
            return self._jobs.get(key)

    def put(self, key: str, state: JobState) -> None:
        with self._lock:
            self._jobs[key] = state
            if state.generation > self._generations.get(key, -1):
                self._generations[key] = state.generation

    def remove(self, key: str) -> Optional[JobState]:
        with self._lock:
            return self._jobs.pop(key, None)

    def snapshot(self) -> List[JobSnapshot]:
        with self._lock:
            snapshots = [state.to_snapshot() for state in self._jobs.values()]
        return sorted(snapshots, key=lambda s: s.started_at)

    def count(self) -> int:
        with self._lock:
            return len(self._jobs)

    def next_generation(self, key: str) -> int:
        with self._lock:
            generation = self._generations.get(key, -1) + 1
            self._generations[key] = generation
            return generation

    def update_job_fields(
        self, key: str, fields: Dict[str, Any], expected_generation: int
    ) -> bool:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update job fields: {', '.join(sorted(unknown))}")

        with self._lock:
            state = self._jobs.get(key)
            if state is None or state.generation != expected_generation:
                return False
            for field_name, value in fields.items():
                setattr(state, field_name, value)
            return True

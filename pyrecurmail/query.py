# pyrecurmail/query.py
import time
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

from .serialization.base import BaseSerializer
from .serialization.json_serializer import JsonSerializer
from .storage.base import JobRegistry


class QueryService:
    """Read-only reporting over the job registry."""

    def __init__(self, registry: JobRegistry, serializer: Optional[BaseSerializer] = None):
        self.registry = registry
        self.serializer = serializer or JsonSerializer()
        self._started = time.monotonic()

    def list_active(self) -> List[Dict[str, Any]]:
        return [self.serializer.serialize_snapshot(s) for s in self.registry.snapshot()]

    def health_summary(self) -> Dict[str, Any]:
        return {
            "uptime": round(time.monotonic() - self._started, 3),
            "activeJobCount": self.registry.count(),
            "timestamp": datetime.now(UTC).isoformat(),
        }

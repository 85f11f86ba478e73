from .base import JobRegistry
from .memory_storage import MemoryJobRegistry

__all__ = ["JobRegistry", "MemoryJobRegistry"]

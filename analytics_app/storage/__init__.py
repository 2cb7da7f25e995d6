"""
Event storage module.

Strategy Pattern for where tracked events are written. The choice also
decides whether sessions are persisted (relational) or only computed
(ClickHouse).
"""

from .strategies import EventStorageStrategy, RelationalEventStorage, ClickHouseEventStorage
from .factory import EventStorageFactory, EventStorageBackend

__all__ = [
    "EventStorageStrategy",
    "RelationalEventStorage",
    "ClickHouseEventStorage",
    "EventStorageFactory",
    "EventStorageBackend",
]

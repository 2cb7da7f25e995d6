"""
Factory for creating event storage instances.
"""

from enum import Enum
from typing import Optional
import logging

from sqlalchemy.orm import Session

from .strategies import EventStorageStrategy, RelationalEventStorage, ClickHouseEventStorage
from analytics_app.config import settings

logger = logging.getLogger(__name__)


class EventStorageBackend(Enum):
    """Available event storage backends"""
    RELATIONAL = "relational"
    CLICKHOUSE = "clickhouse"


class EventStorageFactory:
    """
    Creates event storage from settings.

    ClickHouse storage is a process-wide singleton (it only holds an HTTP
    endpoint). Relational storage is bound to the request's database session,
    so a new one is built per call.
    """

    _instance: EventStorageStrategy = None

    @classmethod
    def create(cls, backend: EventStorageBackend, db: Optional[Session] = None) -> EventStorageStrategy:
        """
        Args:
            backend: Type of storage backend (from enum)
            db: Database session, required for the relational backend
        """
        if backend == EventStorageBackend.RELATIONAL:
            if db is None:
                raise ValueError("Relational event storage needs a database session")
            return RelationalEventStorage(db)

        if backend == EventStorageBackend.CLICKHOUSE:
            if cls._instance is None:
                cls._instance = ClickHouseEventStorage(
                    url=settings.clickhouse_url,
                    database=settings.clickhouse_database,
                )
            return cls._instance

        raise ValueError(f"Unknown event storage backend: {backend}")

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None

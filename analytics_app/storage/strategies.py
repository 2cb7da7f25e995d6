"""
Event storage strategies using Strategy Pattern.

Allows switching where tracked events go:
- Relational: events in the main database, next to the sessions table
- ClickHouse: append-only columnar store, no session bookkeeping
"""

from abc import ABC, abstractmethod
import json
import logging

import requests
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from analytics_app.models.event import WebsiteEvent
from analytics_app.schemas.event import EventData

logger = logging.getLogger(__name__)


class EventStorageStrategy(ABC):
    """
    Abstract base class for event storage strategies.

    Columnar stores keep the session attributes on every event; the
    relational store only references the session row.
    """

    @abstractmethod
    async def save_event(self, event: EventData) -> bool:
        """
        Store a single event.

        Args:
            event: EventData with session attributes

        Returns:
            True if successful, False otherwise
        """
        pass


class RelationalEventStorage(EventStorageStrategy):
    """
    Events in the main database.

    Works out of the box with SQLite or PostgreSQL. Sessions are separate
    rows, so only the event columns are written here.
    """

    def __init__(self, db: Session):
        self.db = db

    async def save_event(self, event: EventData) -> bool:
        row = WebsiteEvent(
            id=event.id,
            website_id=event.website_id,
            session_id=event.session_id,
            created_at=event.created_at,
            url_path=event.url_path,
            url_query=event.url_query,
            referrer_path=event.referrer_path,
            referrer_query=event.referrer_query,
            referrer_domain=event.referrer_domain,
            page_title=event.page_title,
            event_type=event.event_type,
            event_name=event.event_name,
        )
        try:
            self.db.add(row)
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error("❌ Event storage error: %s", e)
            return False


class ClickHouseEventStorage(EventStorageStrategy):
    """
    ClickHouse implementation, written to over the HTTP interface.

    Table design:
    - MergeTree engine, partitioned by month
    - Ordered by (website_id, session_id, created_at)
    - Every row carries its session attributes, so there is no session table
      and session resolution never touches the database
    """

    def __init__(self, url: str = "http://localhost:8123", database: str = "analytics", timeout: int = 5):
        """
        Args:
            url: ClickHouse HTTP endpoint
            database: Database holding the website_event table
            timeout: HTTP timeout in seconds
        """
        self.url = url
        self.database = database
        self.timeout = timeout
        self._init_database()

    @property
    def table(self) -> str:
        return f"{self.database}.website_event"

    def _init_database(self):
        """Create database and table if they don't exist"""
        try:
            requests.post(
                self.url,
                data=f"CREATE DATABASE IF NOT EXISTS {self.database}",
                timeout=self.timeout,
            ).raise_for_status()

            requests.post(
                self.url,
                data=f"""
                    CREATE TABLE IF NOT EXISTS {self.table} (
                        event_id UUID,
                        website_id UUID,
                        session_id UUID,
                        created_at DateTime('UTC'),
                        url_path String,
                        url_query String,
                        referrer_path String,
                        referrer_query String,
                        referrer_domain String,
                        page_title String,
                        event_type UInt32,
                        event_name String,
                        hostname LowCardinality(String),
                        browser LowCardinality(String),
                        os LowCardinality(String),
                        device LowCardinality(String),
                        screen LowCardinality(String),
                        language LowCardinality(String),
                        country LowCardinality(String),
                        subdivision1 LowCardinality(String),
                        subdivision2 LowCardinality(String),
                        city String
                    )
                    ENGINE = MergeTree()
                    PARTITION BY toYYYYMM(created_at)
                    ORDER BY (website_id, session_id, created_at)
                """,
                timeout=self.timeout,
            ).raise_for_status()

            logger.info("✅ ClickHouse event storage initialized")

        except requests.RequestException as e:
            logger.warning("⚠️  ClickHouse initialization failed: %s", e)

    def _row(self, event: EventData) -> dict:
        row = event.model_dump(exclude={"id", "created_at"})
        # ClickHouse String columns are not nullable
        row = {key: ("" if value is None else value) for key, value in row.items()}
        row["event_id"] = event.id
        row["created_at"] = event.created_at.strftime("%Y-%m-%d %H:%M:%S")
        return row

    async def save_event(self, event: EventData) -> bool:
        try:
            # requests blocks, keep it off the event loop
            response = await run_in_threadpool(
                requests.post,
                self.url,
                params={"query": f"INSERT INTO {self.table} FORMAT JSONEachRow"},
                data=json.dumps(self._row(event)),
                timeout=self.timeout,
            )
            return response.status_code == 200

        except requests.RequestException as e:
            logger.error("❌ ClickHouse storage error: %s", e)
            return False

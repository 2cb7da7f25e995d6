"""
Database models for the collector.

Note: with the ClickHouse backend, events live in ClickHouse and
sessions are not persisted at all. Only websites are always relational.
"""

from .website import Website
from .session import VisitorSession
from .event import WebsiteEvent

__all__ = ["Website", "VisitorSession", "WebsiteEvent"]

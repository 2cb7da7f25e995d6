"""
Event records handed to event storage.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional
import uuid


PAGEVIEW = 1
CUSTOM_EVENT = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventData(BaseModel):
    """
    One tracked event plus the attributes of its session.

    The relational backend only needs the event columns (sessions have
    their own table). The columnar backend stores the whole record,
    since it keeps no session table.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    website_id: str
    session_id: str
    created_at: datetime = Field(default_factory=_utcnow)

    url_path: str = ""
    url_query: Optional[str] = None
    referrer_path: Optional[str] = None
    referrer_query: Optional[str] = None
    referrer_domain: Optional[str] = None
    page_title: Optional[str] = None
    event_type: int = PAGEVIEW
    event_name: Optional[str] = None

    # Session attributes (used by the columnar backend)
    hostname: Optional[str] = None
    browser: Optional[str] = None
    os: Optional[str] = None
    device: Optional[str] = None
    screen: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None
    subdivision1: Optional[str] = None
    subdivision2: Optional[str] = None
    city: Optional[str] = None

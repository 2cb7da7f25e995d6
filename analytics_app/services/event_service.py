from typing import Optional, Tuple
from urllib.parse import urlsplit

from analytics_app.schemas.collect import CollectPayload
from analytics_app.schemas.event import EventData, PAGEVIEW, CUSTOM_EVENT
from analytics_app.schemas.session import SessionData
from analytics_app.storage.strategies import EventStorageStrategy


def split_url(url: Optional[str]) -> Tuple[str, Optional[str]]:
    """Path and query of a page URL, which may be relative"""
    if not url:
        return "", None
    parts = urlsplit(url)
    return parts.path or "/", parts.query or None


def parse_referrer(
    referrer: Optional[str],
    hostname: Optional[str]
) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Path, query and domain of the referrer.

    The domain loses a leading "www." and is dropped when it is the
    site itself (internal navigation).
    """
    if not referrer:
        return None, None, None

    parts = urlsplit(referrer)
    domain = (parts.hostname or "").lower()
    if domain.startswith("www."):
        domain = domain[4:]

    if not domain or domain == (hostname or "").lower():
        domain = None

    return parts.path or None, parts.query or None, domain


def build_event(session: SessionData, payload: CollectPayload) -> EventData:
    url_path, url_query = split_url(payload.url)
    referrer_path, referrer_query, referrer_domain = parse_referrer(payload.referrer, payload.hostname)

    return EventData(
        website_id=session.website_id,
        session_id=session.id,
        url_path=url_path,
        url_query=url_query,
        referrer_path=referrer_path,
        referrer_query=referrer_query,
        referrer_domain=referrer_domain,
        page_title=payload.title,
        event_type=CUSTOM_EVENT if payload.name else PAGEVIEW,
        event_name=payload.name,
        **session.model_dump(exclude={"id", "website_id"}),
    )


class EventService:
    """Records tracked events through the configured event storage"""

    def __init__(self, storage: EventStorageStrategy):
        self.storage = storage

    async def record(self, session: SessionData, payload: CollectPayload) -> EventData:
        event = build_event(session, payload)
        await self.storage.save_event(event)
        return event

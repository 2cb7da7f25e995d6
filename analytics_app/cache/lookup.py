"""
Read-through lookup cache for websites and sessions.

Sits between session resolution and the database. Entries are pydantic
JSON under "website:<id>" and "session:<id>". Misses fall through to the
database and populate the cache; absent rows are not cached.
"""

from typing import Optional
import logging

from pydantic import ValidationError

from analytics_app.cache.strategies import CacheStrategy
from analytics_app.config import settings
from analytics_app.schemas.session import SessionData, WebsiteData
from analytics_app.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class LookupCache:

    def __init__(self, cache: CacheStrategy, store: SessionStore, ttl: Optional[int] = None):
        self.cache = cache
        self.store = store
        self.ttl = ttl if ttl is not None else settings.cache_ttl

    @property
    def enabled(self) -> bool:
        return self.cache.enabled

    async def _get(self, key: str, model):
        cached = await self.cache.get(key)
        if not cached:
            return None
        try:
            return model.model_validate_json(cached)
        except ValidationError:
            logger.warning("Dropping unreadable cache entry %s", key)
            await self.cache.delete(key)
            return None

    async def fetch_website(self, website_id: str) -> Optional[WebsiteData]:
        key = f"website:{website_id}"
        website = await self._get(key, WebsiteData)
        if website is not None:
            return website

        row = await self.store.get_website(website_id)
        if row is None:
            return None

        website = WebsiteData.model_validate(row)
        await self.cache.set(key, website.model_dump_json(), ttl=self.ttl)
        return website

    async def fetch_session(self, session_id: str) -> Optional[SessionData]:
        key = f"session:{session_id}"
        session = await self._get(key, SessionData)
        if session is not None:
            return session

        row = await self.store.get_session(session_id)
        if row is None:
            return None

        session = SessionData.model_validate(row)
        await self.store_session(session)
        return session

    async def store_session(self, session: SessionData) -> bool:
        return await self.cache.set(f"session:{session.id}", session.model_dump_json(), ttl=self.ttl)

    async def delete_website(self, website_id: str) -> bool:
        """Invalidate a website, e.g. after it was deleted"""
        return await self.cache.delete(f"website:{website_id}")

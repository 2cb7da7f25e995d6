"""
FastAPI dependencies for dependency injection.

Provides the process-wide cache and resolver configuration, plus
per-request services bound to the request's database session.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override a dependency)
- Flexible (swap implementations via config)
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from analytics_app.cache.factory import CacheFactory, CacheBackend
from analytics_app.cache.lookup import LookupCache
from analytics_app.cache.strategies import CacheStrategy
from analytics_app.config import ResolverConfig, settings
from analytics_app.database.connection import get_db
from analytics_app.storage.factory import EventStorageFactory, EventStorageBackend
from analytics_app.storage.strategies import EventStorageStrategy


@lru_cache()
def get_cache() -> CacheStrategy:
    """Cache backend singleton, chosen by settings.cache_backend"""
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_resolver_config() -> ResolverConfig:
    """Read-only resolver configuration, built once at startup"""
    return ResolverConfig.from_settings(settings)


def get_event_storage(db: Session = Depends(get_db)) -> EventStorageStrategy:
    backend = EventStorageBackend(settings.event_storage_backend)
    return EventStorageFactory.create(backend, db=db)


def get_session_service(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache),
    config: ResolverConfig = Depends(get_resolver_config)
):
    """
    Get SessionService with all dependencies injected.

    Controller depends on service, service depends on
    infrastructure (db, cache).
    """
    from analytics_app.services.session_service import SessionService
    from analytics_app.services.session_store import SessionStore

    store = SessionStore(db)
    return SessionService(store=store, config=config, lookup=LookupCache(cache, store))


def get_event_service(storage: EventStorageStrategy = Depends(get_event_storage)):
    from analytics_app.services.event_service import EventService
    return EventService(storage)

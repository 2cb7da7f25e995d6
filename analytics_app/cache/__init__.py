"""
Lookup cache for the collector.
Strategy Pattern backends plus a read-through layer for websites and sessions.
"""

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from .factory import CacheFactory, CacheBackend
from .lookup import LookupCache

__all__ = [
    "CacheStrategy",
    "RedisCache",
    "InMemoryCache",
    "NullCache",
    "CacheFactory",
    "CacheBackend",
    "LookupCache",
]

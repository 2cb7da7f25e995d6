"""
Test configuration and fixtures for the pageview collector.
This centralizes all test setup, making individual tests clean.
"""

import json
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from starlette.requests import Request

from main import app
from analytics_app.cache.factory import CacheFactory
from analytics_app.config import ResolverConfig
from analytics_app.database.connection import Base, get_db
from analytics_app.dependencies import get_cache, get_resolver_config
from analytics_app.models.website import Website
from analytics_app.storage.factory import EventStorageFactory

# Test database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
CLIENT_IP = "203.0.113.7"


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    This ensures tests are isolated and don't affect each other.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Factories and lru_cache'd dependencies must not leak between tests"""
    CacheFactory.clear_instance()
    EventStorageFactory.clear_instance()
    get_cache.cache_clear()
    get_resolver_config.cache_clear()
    yield
    CacheFactory.clear_instance()
    EventStorageFactory.clear_instance()
    get_cache.cache_clear()
    get_resolver_config.cache_clear()


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database dependency overridden.
    This is the main fixture that tests will use.
    """
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def website(db_session):
    """A live website"""
    site = Website(id=str(uuid.uuid4()), name="Example", domain="example.com")
    db_session.add(site)
    db_session.commit()
    return site


@pytest.fixture
def resolver_config():
    return ResolverConfig(secret="test-signing-secret-0123456789abcdef", salt="test-salt")


@pytest.fixture
def make_payload():
    """Collect request body for a website, with optional payload overrides"""
    def _make_payload(website_id, **overrides):
        payload = {
            "website": website_id,
            "hostname": "example.com",
            "screen": "1920x1080",
            "language": "en-US",
            "url": "/pricing?plan=pro",
            "referrer": "https://www.google.com/search?q=analytics",
            "title": "Pricing",
        }
        payload.update(overrides)
        return {"type": "event", "payload": payload}

    return _make_payload


@pytest.fixture
def session_factory(db_session):
    """Independent database sessions, for simulating concurrent requests"""
    return TestingSessionLocal


@pytest.fixture
def make_request():
    """
    Build a Starlette request for calling services directly.

    body may be a dict (sent as JSON), raw bytes, or None for an empty body.
    """
    def _make_request(body=None, headers=None, client_ip=CLIENT_IP):
        if isinstance(body, dict):
            raw = json.dumps(body).encode("utf-8")
        else:
            raw = body or b""

        all_headers = {"user-agent": CHROME_UA, "content-type": "application/json"}
        all_headers.update(headers or {})

        scope = {
            "type": "http",
            "method": "POST",
            "path": "/api/send",
            "query_string": b"",
            "headers": [(k.lower().encode(), v.encode()) for k, v in all_headers.items()],
            "client": (client_ip, 50000) if client_ip else None,
        }

        async def receive():
            return {"type": "http.request", "body": raw, "more_body": False}

        return Request(scope, receive)

    return _make_request

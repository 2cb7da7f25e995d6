import uuid

from fastapi.testclient import TestClient

from analytics_app.config import secret, settings
from analytics_app.models.event import WebsiteEvent
from analytics_app.models.session import VisitorSession
from analytics_app.services.tokens import parse_session_token


CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_HEADERS = {"user-agent": CHROME_UA, "x-forwarded-for": "203.0.113.7"}


class FakeResponse:
    status_code = 200

    def raise_for_status(self):
        pass


class TestCollectEndpoint:
    """Test POST /api/send"""

    def test_records_pageview_and_returns_token(self, client: TestClient, db_session, website, make_payload):
        response = client.post("/api/send", json=make_payload(website.id), headers=BROWSER_HEADERS)
        assert response.status_code == 200

        session = parse_session_token(response.text, secret())
        assert session is not None
        assert session.website_id == website.id
        assert session.hostname == "example.com"

        assert db_session.get(VisitorSession, session.id) is not None

        event = db_session.query(WebsiteEvent).one()
        assert event.session_id == session.id
        assert event.url_path == "/pricing"
        assert event.url_query == "plan=pro"
        assert event.referrer_domain == "google.com"
        assert event.page_title == "Pricing"
        assert event.event_type == 1

    def test_token_reuses_session(self, client: TestClient, db_session, website, make_payload):
        """The returned token lets the next request skip resolution"""
        first = client.post("/api/send", json=make_payload(website.id), headers=BROWSER_HEADERS)
        token = first.text

        headers = dict(BROWSER_HEADERS)
        headers[settings.cache_token_header] = token
        second = client.post(
            "/api/send",
            json=make_payload(website.id, url="/docs", name="download"),
            headers=headers,
        )

        assert second.status_code == 200
        assert parse_session_token(second.text, secret()) == parse_session_token(token, secret())
        assert db_session.query(VisitorSession).count() == 1
        assert db_session.query(WebsiteEvent).count() == 2
        custom = db_session.query(WebsiteEvent).filter(WebsiteEvent.event_type == 2).one()
        assert custom.event_name == "download"

    def test_malformed_website_id(self, client: TestClient, db_session, make_payload):
        response = client.post("/api/send", json=make_payload("not-a-uuid"), headers=BROWSER_HEADERS)

        assert response.status_code == 400
        assert db_session.query(WebsiteEvent).count() == 0

    def test_empty_body(self, client: TestClient):
        response = client.post("/api/send", content=b"", headers=BROWSER_HEADERS)

        assert response.status_code == 400

    def test_unknown_website(self, client: TestClient, make_payload):
        website_id = str(uuid.uuid4())

        response = client.post("/api/send", json=make_payload(website_id), headers=BROWSER_HEADERS)

        assert response.status_code == 404
        assert website_id in response.json()["detail"]

    def test_bots_are_acknowledged_not_recorded(self, client: TestClient, db_session, website, make_payload):
        response = client.post(
            "/api/send",
            json=make_payload(website.id),
            headers={"user-agent": "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"},
        )

        assert response.status_code == 200
        assert response.json() == {"beep": "boop"}
        assert db_session.query(VisitorSession).count() == 0

    def test_ignored_ip(self, client: TestClient, db_session, website, make_payload, monkeypatch):
        monkeypatch.setattr(settings, "ignore_ips", "203.0.113.0/24, 10.0.0.1")

        response = client.post("/api/send", json=make_payload(website.id), headers=BROWSER_HEADERS)

        assert response.status_code == 403
        assert db_session.query(WebsiteEvent).count() == 0

    def test_clickhouse_backend_skips_session_rows(self, client: TestClient, db_session, website, make_payload, monkeypatch):
        calls = []

        def fake_post(url, **kwargs):
            calls.append(kwargs)
            return FakeResponse()

        monkeypatch.setattr("analytics_app.storage.strategies.requests.post", fake_post)
        monkeypatch.setattr(settings, "event_storage_backend", "clickhouse")

        response = client.post("/api/send", json=make_payload(website.id), headers=BROWSER_HEADERS)

        assert response.status_code == 200
        assert db_session.query(VisitorSession).count() == 0
        assert db_session.query(WebsiteEvent).count() == 0
        assert any("INSERT" in kwargs.get("params", {}).get("query", "") for kwargs in calls)


class TestRootEndpoints:

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

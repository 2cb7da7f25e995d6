from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from analytics_app.database.connection import Base


class WebsiteEvent(Base):
    """
    Pageview or custom event, stored when the relational backend is active.

    The ClickHouse backend keeps events in its own table instead.
    """
    __tablename__ = "website_events"

    id = Column(String(36), primary_key=True)
    website_id = Column(String(36), nullable=False, index=True)
    session_id = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    url_path = Column(String(500), nullable=False)
    url_query = Column(String(500), nullable=True)
    referrer_path = Column(String(500), nullable=True)
    referrer_query = Column(String(500), nullable=True)
    referrer_domain = Column(String(500), nullable=True)
    page_title = Column(String(500), nullable=True)
    event_type = Column(Integer, default=1)  # 1 = pageview, 2 = custom event
    event_name = Column(String(50), nullable=True)

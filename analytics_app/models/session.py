from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from analytics_app.database.connection import Base


class VisitorSession(Base):
    """
    One deduplicated visitor on a website and hostname.

    The primary key is derived from (website_id, hostname, ip, user_agent),
    so concurrent requests from the same visitor compete for the same row
    and the primary key constraint decides the winner.
    """
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True)
    website_id = Column(String(36), ForeignKey("websites.id"), nullable=False, index=True)
    hostname = Column(String(100), nullable=True)
    browser = Column(String(40), nullable=True)
    os = Column(String(40), nullable=True)
    device = Column(String(20), nullable=True)
    screen = Column(String(11), nullable=True)
    language = Column(String(35), nullable=True)
    country = Column(String(2), nullable=True)
    subdivision1 = Column(String(20), nullable=True)
    subdivision2 = Column(String(50), nullable=True)
    city = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

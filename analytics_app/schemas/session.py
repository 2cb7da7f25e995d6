from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional


class WebsiteData(BaseModel):
    """Cached projection of a website row"""
    id: str
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionData(BaseModel):
    """
    A resolved session.

    Reads from the VisitorSession model (from_attributes=True), and is also
    what gets embedded in cache tokens and built in memory for ClickHouse.
    """
    id: str
    website_id: str
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

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class ClientInfo(BaseModel):
    """Client details derived from request headers and payload"""
    model_config = ConfigDict(frozen=True)

    user_agent: str = ""
    browser: Optional[str] = None
    os: Optional[str] = None
    ip: Optional[str] = None
    country: Optional[str] = None
    subdivision1: Optional[str] = None
    subdivision2: Optional[str] = None
    city: Optional[str] = None
    device: Optional[str] = None
    is_bot: bool = False

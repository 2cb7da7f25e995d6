from .collect import CollectPayload, CollectRequestBody
from .session import ClientInfo, SessionData, WebsiteData
from .event import EventData, PAGEVIEW, CUSTOM_EVENT

__all__ = [
    "CollectPayload",
    "CollectRequestBody",
    "ClientInfo",
    "SessionData",
    "WebsiteData",
    "EventData",
    "PAGEVIEW",
    "CUSTOM_EVENT",
]

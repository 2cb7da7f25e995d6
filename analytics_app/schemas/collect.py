from pydantic import BaseModel, Field, ConfigDict
from typing import Literal, Optional


class CollectPayload(BaseModel):
    """Tracking payload sent by the browser script"""
    website: Optional[str] = Field(None, description="Website id (UUID)")
    hostname: Optional[str] = None
    screen: Optional[str] = Field(None, description="Screen size, e.g. 1920x1080")
    language: Optional[str] = None
    url: Optional[str] = Field(None, description="Page path with query string")
    referrer: Optional[str] = None
    title: Optional[str] = None
    name: Optional[str] = Field(None, description="Custom event name, absent for pageviews")

    model_config = ConfigDict(extra="ignore")


class CollectRequestBody(BaseModel):
    type: Literal["event"] = "event"
    payload: Optional[CollectPayload] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "event",
                "payload": {
                    "website": "f6a7c8e2-2b3c-4d5e-8f90-1a2b3c4d5e6f",
                    "hostname": "example.com",
                    "screen": "1920x1080",
                    "language": "en-US",
                    "url": "/pricing?plan=pro",
                    "referrer": "https://www.google.com/search?q=analytics",
                    "title": "Pricing",
                }
            }
        }
    )

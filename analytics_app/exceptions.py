"""
Exceptions raised while resolving tracking requests.

Malformed client input is never an exception (resolution just returns None).
These are the conditions worth surfacing to the HTTP layer.
"""


class TrackingError(Exception):
    """Base class for collector errors"""


class WebsiteNotFoundError(TrackingError):
    """A well-formed website id that points to no live website."""

    def __init__(self, website_id: str):
        self.website_id = website_id
        super().__init__(f"Website not found: {website_id}")

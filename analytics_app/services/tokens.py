"""
Signed cache tokens.

After a session is resolved, the collector hands the tracker a signed token
that describes it. When the tracker sends the token back, resolution is
skipped entirely.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt

from analytics_app.schemas.session import SessionData

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_token(session: SessionData, secret: str) -> str:
    """Sign a session into a cache token"""
    claims = session.model_dump()
    claims["iat"] = datetime.now(timezone.utc)
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def parse_token(token: Optional[str], secret: str) -> Optional[Dict[str, Any]]:
    """
    Verify a cache token and return its claims.

    Every failure (missing token, bad signature, garbage) returns None,
    so callers only ever see "hit" or "miss".
    """
    if not token:
        return None
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug("Cache token rejected: %s", e)
        return None


def parse_session_token(token: Optional[str], secret: str) -> Optional[SessionData]:
    """Like parse_token, but only accepts claims that describe a session"""
    claims = parse_token(token, secret)
    if not claims:
        return None
    try:
        return SessionData.model_validate(claims)
    except ValueError:
        return None
